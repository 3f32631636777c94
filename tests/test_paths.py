import pytest

from galene.paths import base_url, parse_group_name, split_path


@pytest.mark.parametrize(
    "path,expected",
    [
        ("", ""),
        ("/foo", ""),
        ("foo", ""),
        ("group/foo", ""),
        ("/group", ""),
        ("/group/..", ""),
        ("/group/foo/../bar", "bar"),
        ("/group/foo", "foo"),
        ("/group/foo/", "foo"),
        ("/group/foo/bar", "foo/bar"),
        ("/group/foo/bar/", "foo/bar"),
    ],
)
def test_parse_group_name(path, expected):
    assert parse_group_name("/group/", path) == expected


def test_parse_group_name_collapses_slashes():
    assert parse_group_name("/group/", "/group//foo//bar") == "foo/bar"


def test_parse_group_name_cannot_escape_root():
    assert parse_group_name("/group/", "/group/a/../../b") == "b"


@pytest.mark.parametrize(
    "proxy,tls,host,expected",
    [
        ("", True, "a.org", "https://a.org"),
        ("", False, "a.org", "http://a.org"),
        ("/base", True, "a.org", "https://a.org/base"),
        ("/base", False, "a.org", "http://a.org/base"),
        ("http:", True, "a.org", "http://a.org"),
        ("https:", False, "a.org", "https://a.org"),
        ("http:/base", True, "a.org", "http://a.org/base"),
        ("https:/base", False, "a.org", "https://a.org/base"),
        ("https://b.org", True, "a.org", "https://b.org"),
        ("https://b.org", False, "a.org", "https://b.org"),
        ("http://b.org", True, "a.org", "http://b.org"),
        ("http://b.org", False, "a.org", "http://b.org"),
    ],
)
def test_base_url(proxy, tls, host, expected):
    assert base_url(proxy, tls, host) == expected


def test_base_url_rejects_bad_proxy():
    with pytest.raises(ValueError):
        base_url("http://[bad", True, "a.org")


@pytest.mark.parametrize(
    "path,a,b,c",
    [
        ("", "", "", ""),
        ("/a", "/a", "", ""),
        ("/.a", "", ".a", ""),
        ("/.a/", "", ".a", "/"),
        ("/.a/b", "", ".a", "/b"),
        ("/.a/b/", "", ".a", "/b/"),
        ("/.a/b/c", "", ".a", "/b/c"),
        ("/.a/b/.c/", "", ".a", "/b/.c/"),
        ("/a/.b", "/a", ".b", ""),
        ("/a/.b/", "/a", ".b", "/"),
        ("/a/.b/c", "/a", ".b", "/c"),
        ("/a/.b/c/", "/a", ".b", "/c/"),
        ("/a/.b/c/d", "/a", ".b", "/c/d"),
        ("/a/.b/c/d/", "/a", ".b", "/c/d/"),
        ("/a/.b/c/.d/", "/a", ".b", "/c/.d/"),
    ],
)
def test_split_path(path, a, b, c):
    assert split_path(path) == (a, b, c)