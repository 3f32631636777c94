# galene

Server-side building blocks for a videoconferencing server:

- **Tokens**: stateful tokens kept in a JSON Lines file (`galene.stateful`),
  signed JWTs checked against JWK keys (`galene.jwt_token`), and one
  entry point that tries both (`galene.auth.parse`). The exceptions they
  raise are in `galene.errors`.
- **HTTP helpers**: ETag parsing and `If-Match` / `If-None-Match` evaluation
  (`galene.precondition`), URL path splitting, group-name parsing and
  base-URL computation (`galene.paths`), and response-header and
  recordings-page helpers (`galene.httputil`).
- **Unbounded channel**: a thread-safe queue whose consumer takes every
  pending item at once (`galene.unbounded`).

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Stateful tokens

```python
from datetime import datetime, timedelta, timezone

from galene import stateful
from galene.stateful import Stateful

stateful.set_stateful_filename("/var/lib/galene/tokens.jsonl")

tok = Stateful(
    token="token",
    group="lobby",
    username="alice",
    permissions=["present", "message"],
    expires=datetime.now(timezone.utc) + timedelta(hours=1),
)
stateful.update(tok, "")

stored, etag = stateful.get("token")
username, permissions = stored.check("", "lobby", "alice")
```

`update` and `delete` take an ETag. An entry that already exists is changed
only when the ETag matches the file's current one; a new entry is added only
when the ETag is empty. Otherwise `TagMismatchError` is raised. A token that
is not there raises `TokenNotFoundError`. `list_tokens(group)` returns the
tokens of a group (all tokens for `""`) ordered by expiry, together with the
ETag, and `expire()` drops tokens that expired more than a week ago.

Tokens read from the file always get the `message` permission added.
`Stateful.check` raises `ValueError` for a token of another group, an expired
token or one that is not valid yet.

The same operations are available on a `TokenStore` of your own:

```python
from galene.stateful import TokenStore

store = TokenStore("tokens.jsonl")
tokens, etag = store.list("lobby")
```

## Checking a client's token

```python
from galene.auth import parse

tok = parse(client_token, group_keys)   # a JWT or a stateful token
username, permissions = tok.check("example.com", "lobby", None)
```

`group_keys` is a list of JWKs as dictionaries. Symmetric keys (`oct`, with
`HS256`, `HS384` or `HS512`) and P-256 elliptic-curve keys (`ES256`) are
accepted; `galene.jwt_token.parse_key` and `parse_keys` turn them into keys.
JWTs must carry an expiry and are checked with five seconds of leeway. For a
JWT, `check` needs an audience URL whose path is `/group/<name>/` and, when a
host is given, whose host matches it.

If a string does not look like a JWT, `parse` looks it up as a stateful
token. A stateful token without a username, presented by a client that gave
no username, raises `UsernameRequiredError`.

## Conditional requests

```python
from galene.precondition import check_preconditions

status = check_preconditions("GET", if_match, if_none_match, current_etag)
if status:
    ...  # answer with 304 or 412 and stop
```

The result is `HTTPStatus.NOT_MODIFIED`, `HTTPStatus.PRECONDITION_FAILED` or
`None`. An empty ETag stands for an object that does not exist.
`etag_match` and `scan_etag` are available on their own.

## Paths and headers

```python
from galene.paths import base_url, parse_group_name, split_path

split_path("/group/lobby/.status")        # ("/group/lobby", ".status", "")
parse_group_name("/group/", "/group/a/")  # "a"
base_url("", True, "example.com")         # "https://example.com"
```

`galene.httputil` builds the security headers (`csp_headers`), the ETag and
cache-control headers for a file (`cache_headers`), the value of an `Allow`
header (`allow_header`), and the HTML listing of a group's recordings from
`(name, size, is_dir)` entries (`render_recordings`).

## Unbounded channel

```python
from galene.unbounded import Channel

ch = Channel()
ch.put(1)
if ch.wait(timeout=1.0):
    values = ch.get()   # every queued value, oldest first
```

## What this package does not do

It provides no HTTP or WebSocket server, no request routing, no
administration API, no WHIP endpoint and no TURN server, and it does not
store group descriptions or user passwords. The helpers above are meant to
be called from a server that supplies those parts.