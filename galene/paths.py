"""URL path helpers used by the web server."""

from __future__ import annotations

import os
from urllib.parse import urlsplit


def _clean(p):
    """Lexically normalise a slash-separated path."""
    if not p:
        return "."
    rooted = p.startswith("/")
    stack = []
    for part in p.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if stack and stack[-1] != "..":
                stack.pop()
            elif not rooted:
                stack.append("..")
            continue
        stack.append(part)
    joined = "/".join(stack)
    if rooted:
        return "/" + joined
    return joined or "."


def split_path(pth):
    """Split a path at its first component that starts with a dot.

    Return (prefix, special component, remainder); for example
    "/a/.b/c" gives ("/a", ".b", "/c").
    """
    index = pth.find("/.")
    if index < 0:
        return pth, "", ""
    tail = pth[index + 1 :]
    index2 = tail.find("/")
    if index2 < 0:
        return pth[:index], tail, ""
    return pth[:index], tail[:index2], tail[index2:]


def parse_group_name(prefix, p):
    """Extract a group name from p, or return "" if there is none."""
    if not p.startswith(prefix):
        return ""
    name = p[len(prefix) :]
    if not name or name[0] == ".":
        return ""
    if os.sep != "/" and os.sep in name:
        return ""
    return _clean("/" + name)[1:]


def base_url(proxy_url, tls, host):
    """Compute the externally visible base URL of the server.

    proxy_url, if non-empty, overrides the scheme, host and path.
    """
    scheme = "https" if tls else "http"
    path = ""
    if proxy_url:
        parts = urlsplit(proxy_url)
        if parts.scheme:
            scheme = parts.scheme
        netloc = parts.netloc.rpartition("@")[2]
        if netloc:
            host = netloc
        path = parts.path
    if host and path and not path.startswith("/"):
        path = "/" + path
    return f"{scheme}://{host}{path}"