"""Stateful tokens kept in sync with a JSON-lines file."""

from __future__ import annotations

import json
import os
import re
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .errors import TagMismatchError, TokenNotFoundError, UsernameRequiredError

_TIME_RE = re.compile(
    r"^(\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d)(?:\.(\d+))?(Z|z|[+-]\d\d:\d\d)$"
)


def _parse_time(value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid time {value!r}")
    m = _TIME_RE.match(value)
    if not m:
        raise ValueError(f"invalid time {value!r}")
    base, frac, tz = m.groups()
    if tz in ("Z", "z"):
        tz = "+00:00"
    text = base
    if frac:
        text += "." + frac[:6].ljust(6, "0")
    return datetime.fromisoformat(text + tz)


def _format_time(value):
    if value is None:
        return None
    value = _aware(value)
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _aware(value):
    if value.tzinfo is None:
        return value.astimezone()
    return value


def _now():
    return datetime.now(timezone.utc)


@dataclass
class Stateful:
    """A token whose properties are stored on the server."""

    token: str = ""
    group: str = ""
    username: str | None = None
    permissions: list = field(default_factory=list)
    expires: datetime | None = None
    not_before: datetime | None = None
    issued_at: datetime | None = None
    issued_by: str | None = None

    def clone(self):
        return Stateful(
            token=self.token,
            group=self.group,
            username=self.username,
            permissions=list(self.permissions),
            expires=self.expires,
            not_before=self.not_before,
            issued_at=self.issued_at,
            issued_by=self.issued_by,
        )

    def check(self, host, group, username):
        """Return (username, permissions) if the token grants access to group."""
        if not self.group or group != self.group:
            raise ValueError("token for bad group")
        now = _now()
        if self.expires is None or now > _aware(self.expires):
            raise ValueError("token has expired")
        if self.not_before is not None and now < _aware(self.not_before):
            raise ValueError("token is in the future")
        if self.username is not None:
            user = self.username
        elif username is None:
            raise UsernameRequiredError()
        else:
            user = ""
        return user, self.permissions

    def to_dict(self):
        d = {"token": self.token, "group": self.group}
        if self.username is not None:
            d["username"] = self.username
        d["permissions"] = list(self.permissions)
        if self.expires is not None:
            d["expires"] = _format_time(self.expires)
        if self.not_before is not None:
            d["not-before"] = _format_time(self.not_before)
        if self.issued_at is not None:
            d["issuedAt"] = _format_time(self.issued_at)
        if self.issued_by is not None:
            d["issuedBy"] = self.issued_by
        return d

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("token must be a JSON object")
        perms = data.get("permissions")
        if perms is None:
            perms = []
        if not isinstance(perms, list) or not all(
            isinstance(p, str) for p in perms
        ):
            raise ValueError("invalid permissions")
        return cls(
            token=data.get("token") or "",
            group=data.get("group") or "",
            username=data.get("username"),
            permissions=list(perms),
            expires=_parse_time(data.get("expires")),
            not_before=_parse_time(data.get("not-before")),
            issued_at=_parse_time(data.get("issuedAt")),
            issued_by=data.get("issuedBy"),
        )


def _iter_json(text):
    decoder = json.JSONDecoder()
    idx = 0
    while True:
        while idx < len(text) and text[idx] in " \t\r\n":
            idx += 1
        if idx >= len(text):
            return
        obj, idx = decoder.raw_decode(text, idx)
        yield obj


def _sort_key(t):
    if t.expires is None:
        return (0, datetime.min.replace(tzinfo=timezone.utc))
    return (1, _aware(t.expires))


class TokenStore:
    """A set of stateful tokens mirrored in a JSON-lines file."""

    def __init__(self, filename=""):
        self.filename = filename
        self.file_size = 0
        self.mtime_ns = None
        self.tokens = None
        self._lock = threading.RLock()

    def reset(self, filename):
        with self._lock:
            self.filename = filename
            self.file_size = 0
            self.mtime_ns = None

    def _forget(self):
        self.mtime_ns = None
        self.file_size = 0
        self.tokens = None

    def etag(self):
        if self.mtime_ns is None:
            return ""
        return f'"{self.file_size}-{self.mtime_ns}"'

    def load(self):
        """Refresh from the file if it changed; return the current etag."""
        with self._lock:
            if not self.filename:
                self.mtime_ns = None
                self.tokens = None
                return self.etag()
            try:
                st = os.stat(self.filename)
            except FileNotFoundError:
                self._forget()
                return ""
            except OSError:
                self._forget()
                raise
            if self.mtime_ns == st.st_mtime_ns and self.file_size == st.st_size:
                return self.etag()
            try:
                f = open(self.filename, encoding="utf-8")
            except FileNotFoundError:
                self._forget()
                return self.etag()
            except OSError:
                self._forget()
                raise
            with f:
                ts = {}
                try:
                    for obj in _iter_json(f.read()):
                        t = Stateful.from_dict(obj)
                        if "message" not in t.permissions:
                            t.permissions.append("message")
                        ts[t.token] = t
                except ValueError:
                    self.mtime_ns = None
                    self.file_size = 0
                    raise
                self.tokens = ts
                st = os.fstat(f.fileno())
            self.mtime_ns = st.st_mtime_ns
            self.file_size = st.st_size
            return self.etag()

    def get(self, token):
        """Return (token, etag); raise TokenNotFoundError if absent."""
        with self._lock:
            etag = self.load()
            if self.tokens is None or token not in self.tokens:
                raise TokenNotFoundError()
            return self.tokens[token], etag

    def update(self, token, etag):
        """Add or replace a token, subject to the etag."""
        with self._lock:
            if not self.filename:
                if etag:
                    raise TagMismatchError()
                raise TokenNotFoundError()
            self.load()
            if self.tokens is None:
                self.tokens = {}
            if token.token in self.tokens:
                if etag != self.etag():
                    raise TagMismatchError()
                old = self.tokens[token.token]
                self.tokens[token.token] = token
                try:
                    self.rewrite()
                except Exception:
                    self.tokens[token.token] = old
                    raise
                return token
            if etag:
                raise TagMismatchError()
            return self._add(token)

    def _add(self, token):
        directory = os.path.dirname(self.filename)
        if directory:
            os.makedirs(directory, 0o700, exist_ok=True)
        fd = os.open(
            self.filename, os.O_CREAT | os.O_WRONLY | os.O_APPEND, 0o600
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(token.to_dict()) + "\n")
        if self.tokens is None:
            self.tokens = {}
        self.tokens[token.token] = token.clone()
        return token

    def delete(self, token, etag):
        with self._lock:
            if not self.filename:
                raise TokenNotFoundError()
            self.load()
            if self.tokens is None or token not in self.tokens:
                raise TokenNotFoundError()
            if etag != self.etag():
                raise TagMismatchError()
            old = self.tokens.pop(token)
            try:
                self.rewrite()
            except Exception:
                self.tokens[token] = old
                raise

    def _sorted(self, group):
        tokens = self.tokens.values() if self.tokens else []
        selected = [t for t in tokens if not group or t.group == group]
        return sorted(selected, key=_sort_key)

    def rewrite(self):
        """Write the in-memory tokens back to the file."""
        with self._lock:
            if not self.tokens:
                try:
                    os.remove(self.filename)
                except FileNotFoundError:
                    pass
                return
            directory = os.path.dirname(self.filename) or "."
            fd, tmpname = tempfile.mkstemp(dir=directory, prefix="tokens")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    for t in self._sorted(""):
                        f.write(json.dumps(t.to_dict()) + "\n")
                os.replace(tmpname, self.filename)
            except Exception:
                try:
                    os.remove(tmpname)
                except OSError:
                    pass
                raise
            try:
                st = os.stat(self.filename)
            except OSError:
                self.mtime_ns = None
                self.file_size = 0
            else:
                self.mtime_ns = st.st_mtime_ns
                self.file_size = st.st_size

    def list(self, group):
        """Return (tokens sorted by expiry, etag), restricted to group if set."""
        with self._lock:
            self.load()
            return self._sorted(group), self.etag()

    def expire(self):
        """Drop tokens that expired more than a week ago."""
        with self._lock:
            self.load()
            cutoff = _now() - timedelta(days=7)
            if not self.tokens:
                return
            stale = [
                k
                for k, t in self.tokens.items()
                if t.expires is not None and _aware(t.expires) < cutoff
            ]
            for k in stale:
                del self.tokens[k]
            if stale:
                self.rewrite()


_tokens = TokenStore()


def set_stateful_filename(filename):
    _tokens.reset(filename)


def get(token):
    return _tokens.get(token)


def update(token, etag):
    return _tokens.update(token, etag)


def delete(token, etag):
    _tokens.delete(token, etag)


def list_tokens(group):
    return _tokens.list(group)


def expire():
    _tokens.expire()