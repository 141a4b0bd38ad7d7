import pytest

from trustscore_agent.errors import InvalidInput, InvalidUrl
from trustscore_agent.urls import clean_domain, is_https, normalize_url, origin_of


def test_normalize_adds_scheme_lowercases_and_strips_slash():
    assert normalize_url("Example.com/") == "https://example.com"


def test_normalize_keeps_http_scheme():
    assert normalize_url("  HTTP://Example.com/Path///  ") == "http://example.com/path"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_normalize_rejects_empty_input(raw):
    with pytest.raises(InvalidInput) as exc:
        normalize_url(raw)
    assert exc.value.message == "Please enter a website URL"


@pytest.mark.parametrize("raw", ["exa mple.com", "https://example.com:abc", "https://<bad>"])
def test_normalize_rejects_unparseable_urls(raw):
    with pytest.raises(InvalidUrl):
        normalize_url(raw)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("bücher.de", "https://bücher.de"),
        ("MÜNCHEN.de/path", "https://münchen.de/path"),
        ("https://[::1]:8080", "https://[::1]:8080"),
        ("http://[2001:db8::1]/", "http://[2001:db8::1]"),
    ],
)
def test_normalize_accepts_idn_and_ipv6_hosts(raw, expected):
    assert normalize_url(raw) == expected
    assert normalize_url(expected) == expected


def test_invalid_url_is_an_invalid_input_and_value_error():
    with pytest.raises(ValueError):
        normalize_url("exa mple.com")


@pytest.mark.parametrize("raw", ["Example.com/", "http://a.b/c/", "https://sub.example.org/x?y=1"])
def test_normalize_is_idempotent(raw):
    once = normalize_url(raw)
    assert normalize_url(once) == once


def test_is_https_and_origin():
    assert is_https("https://example.com/a")
    assert not is_https("http://example.com")
    assert origin_of("https://example.com:8443/a/b?c") == "https://example.com:8443"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://www.Example.com/", "example.com"),
        ("http://shop.example.com", "shop.example.com"),
        ("WWW.example.com", "example.com"),
        ("example.com", "example.com"),
    ],
)
def test_clean_domain(raw, expected):
    assert clean_domain(raw) == expected
