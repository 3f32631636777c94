from datetime import datetime, timedelta, timezone

import pytest

from galene import stateful
from galene.auth import parse
from galene.errors import TokenNotFoundError


@pytest.fixture
def store_file(tmp_path):
    filename = tmp_path / "test.jsonl"
    filename.touch()
    stateful.set_stateful_filename(str(filename))
    yield filename
    stateful.set_stateful_filename("")


def test_token(store_file):
    future = datetime.now(timezone.utc) + timedelta(hours=1)
    stateful.update(
        stateful.Stateful("token", "group", "user", ["present"], future), ""
    )
    tok = parse("token", None)
    user, perms = tok.check("galene.org:8443", "group", "user")
    assert user == "user"
    assert "present" in perms

    with pytest.raises(TokenNotFoundError):
        parse("bad", None)
    with pytest.raises(TokenNotFoundError):
        parse("bad", [])