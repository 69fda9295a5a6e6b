import logging
from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup

from contentcrawl.domain import CrawlOptions, DiscoveredLink, VisitedSet
from contentcrawl.services.link_discovery import LinkDiscoveryService

BASE = "https://example.com/docs"


def _options(**overrides):
    values = {"base_url": BASE, "max_depth": 2, "max_pages_per_domain": 20}
    values.update(overrides)
    return CrawlOptions(**values)


@pytest.fixture
def service():
    return LinkDiscoveryService()


def test_discovers_internal_link_with_metadata(service):
    html = '<html><body><a href="/docs/intro">  Intro \n page </a></body></html>'
    links = service.discover(html, _options(), VisitedSet(), 0)
    assert links == [DiscoveredLink(url="https://example.com/docs/intro", title="Intro page", depth=1, is_internal=True)]


def test_title_falls_back_to_path(service):
    html = '<a href="/docs/empty"><img src="x.png"></a>'
    links = service.discover(html, _options(), VisitedSet(), 1)
    assert links[0].title == "/docs/empty"
    assert links[0].depth == 2


def test_accepts_parsed_soup(service):
    soup = BeautifulSoup('<a href="/a">A</a>', "html.parser")
    assert [link.url for link in service.discover(soup, _options(), VisitedSet(), 0)] == ["https://example.com/a"]


def test_invalid_hrefs_are_skipped_and_processing_continues(service, caplog):
    caplog.set_level(logging.DEBUG, logger="contentcrawl")
    html = (
        '<a href="http://[::1">bad ipv6</a>'
        '<a href="mailto:me@example.com">mail</a>'
        '<a>no href</a>'
        '<a href="">empty</a>'
        '<a href="/ok">ok</a>'
    )
    links = service.discover(html, _options(), VisitedSet(), 0)
    assert [link.url for link in links] == ["https://example.com/ok"]
    assert "Skipping (invalid)" in caplog.text


def test_external_links_skipped_unless_allowed(service):
    html = '<a href="https://other.org/x">ext</a><a href="/in">in</a>'
    assert [link.url for link in service.discover(html, _options(), VisitedSet(), 0)] == ["https://example.com/in"]

    links = service.discover(html, _options(follow_external_links=True), VisitedSet(), 0)
    assert [(link.url, link.is_internal) for link in links] == [
        ("https://other.org/x", False),
        ("https://example.com/in", True),
    ]


def test_internal_links_skipped_when_disabled(service):
    html = '<a href="https://other.org/x">ext</a><a href="/in">in</a>'
    options = _options(follow_internal_links=False, follow_external_links=True)
    assert [link.url for link in service.discover(html, options, VisitedSet(), 0)] == ["https://other.org/x"]


def test_include_and_exclude_patterns_apply_to_path(service):
    html = (
        '<a href="/docs/intro">intro</a>'
        '<a href="/blog/post">blog</a>'
        '<a href="/docs/internal/secret">secret</a>'
    )
    options = _options(include_patterns="/docs/**", exclude_patterns="/docs/internal/**")
    assert [link.url for link in service.discover(html, options, VisitedSet(), 0)] == ["https://example.com/docs/intro"]


def test_visited_urls_are_skipped(service):
    html = '<a href="/a">a</a><a href="/b">b</a>'
    visited = VisitedSet(["https://example.com/a"])
    assert [link.url for link in service.discover(html, _options(), visited, 0)] == ["https://example.com/b"]


def test_domain_budget_rejects_internal_links(service):
    html = '<a href="/next">next</a><a href="https://other.org/x">ext</a>'
    visited = VisitedSet(["https://example.com/docs"])
    options = _options(max_pages_per_domain=1, follow_external_links=True)
    links = service.discover(html, options, visited, 0)
    assert [link.url for link in links] == ["https://other.org/x"]


def test_domain_budget_is_read_live():
    visited = MagicMock()
    visited.has.return_value = False
    visited.count_for_domain.side_effect = [0, 1]
    service = LinkDiscoveryService()
    html = '<a href="/a">a</a><a href="/b">b</a>'
    links = service.discover(html, _options(max_pages_per_domain=1), visited, 0)
    assert [link.url for link in links] == ["https://example.com/a"]
    assert visited.count_for_domain.call_count == 2


def test_duplicate_hrefs_are_all_emitted_and_visited_is_not_mutated(service):
    html = '<a href="/a">first</a><a href="/a#top">second</a>'
    visited = VisitedSet()
    links = service.discover(html, _options(), visited, 0)
    assert [link.url for link in links] == ["https://example.com/a", "https://example.com/a"]
    assert len(visited) == 0


def test_discovery_is_idempotent(service):
    html = '<a href="/c">c</a><a href="/a">a</a><a href="https://x.org/">x</a><a href="/b">b</a>'
    visited = VisitedSet(["https://example.com/b"])
    options = _options(follow_external_links=True)
    assert service.discover(html, options, visited, 0) == service.discover(html, options, visited, 0)


def test_no_links_beyond_max_depth(service):
    html = '<a href="/a">a</a>'
    assert service.discover(html, _options(max_depth=1), VisitedSet(), 1) == []
    assert service.discover(html, _options(max_depth=0), VisitedSet(), 0) == []


def test_parse_failure_returns_empty(caplog):
    def broken_factory(html):
        raise RuntimeError("parser exploded")

    service = LinkDiscoveryService(soup_factory=broken_factory)
    assert service.discover("<a href='/a'>a</a>", _options(), VisitedSet(), 0) == []
    assert "Could not parse document" in caplog.text


def test_empty_document_returns_empty(service):
    assert service.discover("", _options(), VisitedSet(), 0) == []


def test_base_url_required(service):
    with pytest.raises(ValueError):
        service.discover("<a href='/a'>a</a>", CrawlOptions(), VisitedSet(), 0)


def test_links_on_external_page_are_classified_against_crawl_base(service):
    html = '<a href="https://example.com/docs/a">back</a><a href="/y">y</a>'
    options = _options(follow_external_links=True, follow_internal_links=False)
    links = service.discover(html, options, VisitedSet(), 1, page_url="https://other.org/x")
    assert [(link.url, link.is_internal) for link in links] == [("https://other.org/y", False)]


def test_base_domain_budget_applies_to_links_found_on_external_page(service):
    html = '<a href="https://example.com/docs/a">back</a>'
    visited = VisitedSet(["https://example.com/docs"])
    options = _options(follow_external_links=True, max_pages_per_domain=1)
    assert service.discover(html, options, visited, 1, page_url="https://other.org/x") == []
