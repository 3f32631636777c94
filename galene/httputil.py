"""HTTP header and page helpers used by the web server."""

from __future__ import annotations

from typing import Iterable, NamedTuple
from urllib.parse import quote

NORMAL_CACHE_CONTROL = "max-age=1800"
VERY_CACHABLE_CACHE_CONTROL = "max-age=86400"

_CSP_TAIL = (
    "img-src 'self'; media-src blob: 'self'; "
    "script-src 'unsafe-eval' 'self'; default-src 'self'"
)

_HTML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    "'": "&#39;",
    '"': "&#34;",
}

# characters that need no escaping inside a single URL path segment
_PATH_SEGMENT_SAFE = "$&+:=@"


class RecordingEntry(NamedTuple):
    """A directory entry shown on a recordings page."""

    name: str
    size: int
    is_dir: bool = False


def _escape_html(s):
    return "".join(_HTML_ESCAPES.get(c, c) for c in s)


def _escape_path_segment(s):
    return quote(s, safe=_PATH_SEGMENT_SAFE)


def csp_headers(connect):
    """Return the security headers sent with every page.

    connect, if non-empty, is an extra source allowed for connections.
    """
    if connect:
        c = f"connect-src {connect} ws: wss: 'self'; "
    else:
        c = "connect-src ws: wss: 'self'; "
    return [
        ("Content-Security-Policy", c + _CSP_TAIL),
        ("Referrer-Policy", "no-referrer"),
        ("X-Content-Type-Options", "nosniff"),
    ]


def cache_headers(path, size, mtime_ns, cachable):
    """Return the ETag and cache-control headers for a file."""
    headers = [("ETag", f'"{size}-{mtime_ns}"')]
    if not cachable:
        headers.append(("Cache-Control", "no-cache"))
        return headers
    if path.startswith("/third-party/"):
        cc = VERY_CACHABLE_CACHE_CONTROL
    else:
        cc = NORMAL_CACHE_CONTROL
    headers.append(("Cache-Control", cc))
    return headers


def allow_header(*args):
    """Return the value of an Allow header listing the given methods."""
    return ", ".join(args)


def render_recordings(group, entries: Iterable):
    """Render the HTML listing of a group's recordings.

    entries are (name, size, is_dir) tuples; directories are skipped and
    files are listed in name order.
    """
    files = sorted(
        (RecordingEntry(*e) for e in entries), key=lambda e: e.name
    )
    parts = [
        "<!DOCTYPE html>\n<html><head>\n",
        f"<title>Recordings for group {group}</title>\n",
        '<link rel="stylesheet" type="text/css" href="/common.css"/>',
        "</head><body>\n",
        "<table>\n",
    ]
    action = _escape_path_segment(group)
    for e in files:
        if e.is_dir:
            continue
        name = _escape_html(e.name)
        parts.append(
            f'<tr><td><a href="./{name}">{name}</a></td><td>{int(e.size)}</td>'
        )
        parts.append(
            f'<td><form action="/recordings/{action}/" method="post">'
            f'<input type="hidden" name="filename" value="{e.name}">'
            '<button type="submit" name="q" value="delete">Delete</button>'
            "</form></td></tr>\n"
        )
    parts.append("</table>\n")
    parts.append("</body></html>\n")
    return "".join(parts)