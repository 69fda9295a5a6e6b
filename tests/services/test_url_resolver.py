import pytest

from contentcrawl.exceptions import InvalidUrlError
from contentcrawl.services.url_resolver import UrlResolver, canonicalize

BASE = "https://example.com/docs"


@pytest.fixture
def resolver():
    return UrlResolver()


def test_relative_href_resolves_against_base(resolver):
    resolved = resolver.resolve("/docs/intro", BASE)
    assert resolved.url == "https://example.com/docs/intro"
    assert resolved.path == "/docs/intro"
    assert resolved.is_internal is True


def test_external_host_is_not_internal(resolver):
    resolved = resolver.resolve("https://other.org/page", BASE)
    assert resolved.is_internal is False
    assert resolved.host == "other.org"


def test_subdomain_is_not_internal(resolver):
    assert resolver.resolve("https://blog.example.com/", BASE).is_internal is False


def test_scheme_and_port_do_not_affect_internal(resolver):
    assert resolver.resolve("http://example.com:8080/x", BASE).is_internal is True


def test_fragment_dropped_and_host_lowercased(resolver):
    resolved = resolver.resolve("HTTPS://Example.COM:443/a?b=1#section", BASE)
    assert resolved.url == "https://example.com/a?b=1"


def test_empty_path_becomes_slash():
    assert canonicalize("https://example.com") == "https://example.com/"


@pytest.mark.parametrize("href", ["", "   ", "mailto:a@example.com", "javascript:void(0)", "http://[::1", "http://example.com:99999/", "http:///nohost"])
def test_invalid_hrefs_raise(resolver, href):
    with pytest.raises(InvalidUrlError):
        resolver.resolve(href, BASE)


def test_invalid_url_error_names_reference(resolver):
    with pytest.raises(InvalidUrlError) as exc:
        resolver.resolve("mailto:a@example.com", BASE)
    assert exc.value.href == "mailto:a@example.com"
    assert "unsupported scheme" in str(exc.value)


def test_internal_is_judged_against_crawl_base_not_page(resolver):
    page = "https://other.org/x/index.html"
    back = resolver.resolve("https://example.com/a", page, BASE)
    assert back.is_internal is True

    local = resolver.resolve("y", page, BASE)
    assert local.url == "https://other.org/x/y"
    assert local.is_internal is False
