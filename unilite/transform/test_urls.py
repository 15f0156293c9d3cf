import pytest

from unilite.transform.urls import (
    build_proxy_url,
    is_proxy_endpoint,
    is_script_url,
    resolve_url,
    unwrap_proxy_url,
)

BASE = "https://origin.example"


def test_build_proxy_url_encodes_target_and_session():
    assert (
        build_proxy_url("https://origin.example/a b?x=1", "s1")
        == "/proxy?url=https%3A%2F%2Forigin.example%2Fa%20b%3Fx%3D1&sessionId=s1"
    )


def test_build_proxy_url_without_session():
    assert build_proxy_url(f"{BASE}/", None).endswith("&sessionId=")


@pytest.mark.parametrize(
    "href,expected",
    [
        ("javascript:void(0)", True),
        ("  JavaScript:alert(1)", True),
        ("/java/docs", False),
        ("https://origin.example", False),
    ],
)
def test_is_script_url(href, expected):
    assert is_script_url(href) is expected


def test_is_proxy_endpoint():
    assert is_proxy_endpoint("/proxy")
    assert is_proxy_endpoint("/proxy?url=x")
    assert not is_proxy_endpoint("https://origin.example/proxy")
    assert not is_proxy_endpoint("/proxy/other")


def test_unwrap_proxy_url_round_trip():
    target = f"{BASE}/results?sem=5&x=%2F"
    assert unwrap_proxy_url(build_proxy_url(target, "s1")) == target
    assert unwrap_proxy_url("/dashboard") == "/dashboard"
    assert unwrap_proxy_url("/proxy?sessionId=s1") == "/proxy?sessionId=s1"


@pytest.mark.parametrize(
    "url,base,expected",
    [
        ("/a", BASE, f"{BASE}/a"),
        ("b.php", f"{BASE}/dir/page.php", f"{BASE}/dir/b.php"),
        ("//cdn.example/x.png", BASE, "https://cdn.example/x.png"),
        ("http://other.example/y", BASE, "http://other.example/y"),
        ("", f"{BASE}/page", f"{BASE}/page"),
    ],
)
def test_resolve_url(url, base, expected):
    assert resolve_url(url, base) == expected
