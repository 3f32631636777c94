"""Parsing of client tokens, either JWTs or stateful tokens."""

from . import stateful
from .jwt_token import parse_jwt


def parse(token, keys):
    """Return a token object for token; raise if it is invalid or unknown."""
    j = parse_jwt(token, keys)
    if j is not None:
        return j
    t, _ = stateful.get(token)
    return t