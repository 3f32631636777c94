"""Evaluation of HTTP conditional request headers (RFC 7232)."""

from __future__ import annotations

from http import HTTPStatus

_WHITESPACE = " \t\n\r"


def _etag_char(c):
    o = ord(c)
    return o == 0x21 or 0x23 <= o <= 0x7E or o >= 0x80


def scan_etag(s):
    """Scan an entity tag at the start of s.

    Return (etag, remainder), or ("", "") if no valid tag is present.
    """
    s = s.lstrip(_WHITESPACE)
    start = 2 if s.startswith("W/") else 0
    if len(s) - start < 2 or s[start] != '"':
        return "", ""
    for i in range(start + 1, len(s)):
        c = s[i]
        if c == '"':
            return s[: i + 1], s[i + 1 :]
        if not _etag_char(c):
            return "", ""
    return "", ""


def etag_match(etag, header):
    """Whether etag matches an If-Match or If-None-Match header value.

    An empty etag stands for a resource that does not exist.
    """
    if not header:
        return False
    if header == etag:
        return True
    while True:
        header = header.lstrip(_WHITESPACE)
        if not header:
            return False
        if header[0] == ",":
            header = header[1:]
            continue
        if header[0] == "*":
            return etag != ""
        e, remain = scan_etag(header)
        if not e:
            return False
        if e == etag:
            return True
        header = remain


def check_preconditions(method, if_match, if_none_match, etag):
    """Evaluate request preconditions against etag.

    Return the status that ends the request (304 or 412), or None if
    the request should proceed.  An empty etag means no resource.
    """
    if if_match and not etag_match(etag, if_match):
        return HTTPStatus.PRECONDITION_FAILED
    if if_none_match and etag_match(etag, if_none_match):
        if method in ("GET", "HEAD"):
            return HTTPStatus.NOT_MODIFIED
        return HTTPStatus.PRECONDITION_FAILED
    return None