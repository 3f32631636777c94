import pytest

from galene.httputil import (
    allow_header,
    cache_headers,
    csp_headers,
    render_recordings,
)


def test_csp_headers_default():
    headers = dict(csp_headers(""))
    csp = headers["Content-Security-Policy"]
    assert csp.startswith("connect-src ws: wss: 'self'; ")
    assert csp.endswith("default-src 'self'")
    assert "script-src 'unsafe-eval' 'self'" in csp
    assert headers["Referrer-Policy"] == "no-referrer"
    assert headers["X-Content-Type-Options"] == "nosniff"


def test_csp_headers_with_connect():
    headers = dict(csp_headers("https://auth.example.com"))
    csp = headers["Content-Security-Policy"]
    assert csp.startswith("connect-src https://auth.example.com ws: wss: 'self'; ")
    default = dict(csp_headers(""))["Content-Security-Policy"]
    assert csp.split("; ", 1)[1] == default.split("; ", 1)[1]


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/galene.html", "max-age=1800"),
        ("/third-party/lib.js", "max-age=86400"),
    ],
)
def test_cache_headers_cachable(path, expected):
    headers = dict(cache_headers(path, 42, 1234567890, True))
    assert headers["ETag"] == '"42-1234567890"'
    assert headers["Cache-Control"] == expected


def test_cache_headers_uncachable():
    headers = dict(cache_headers("/third-party/lib.js", 7, 99, False))
    assert headers["Cache-Control"] == "no-cache"
    assert headers["ETag"] == '"7-99"'


def test_allow_header():
    assert allow_header("HEAD", "GET", "PUT", "DELETE") == "HEAD, GET, PUT, DELETE"
    assert allow_header("POST") == "POST"
    assert allow_header() == ""


def test_render_recordings_sorted_and_skips_dirs():
    page = render_recordings(
        "test",
        [("b.webm", 20, False), ("subdir", 0, True), ("a.webm", 10, False)],
    )
    assert page.startswith("<!DOCTYPE html>\n")
    assert "<title>Recordings for group test</title>" in page
    assert page.index("a.webm") < page.index("b.webm")
    assert "subdir" not in page
    assert '<a href="./a.webm">a.webm</a></td><td>10</td>' in page
    assert page.count('<form action="/recordings/test/" method="post">') == 2
    assert page.endswith("</table>\n</body></html>\n")


def test_render_recordings_escaping():
    page = render_recordings("my group", [("<x>.webm", 1, False)])
    assert '<a href="./&lt;x&gt;.webm">&lt;x&gt;.webm</a>' in page
    assert 'action="/recordings/my%20group/"' in page


def test_render_recordings_empty():
    page = render_recordings("g", [])
    assert "<tr>" not in page
    assert "<table>\n</table>\n" in page