import logging
from typing import Callable, Optional, Union

from bs4 import BeautifulSoup

from contentcrawl.domain.crawl_options import CrawlOptions
from contentcrawl.domain.discovered_link import DiscoveredLink
from contentcrawl.domain.visited_set import VisitedSet
from contentcrawl.exceptions import InvalidUrlError
from contentcrawl.services.pattern_matcher import PatternMatcher
from contentcrawl.services.url_resolver import UrlResolver

logger = logging.getLogger(__name__)

Document = Union[BeautifulSoup, str, bytes]


class LinkDiscoveryService:
    """Decides which links on a fetched page are eligible to be crawled next.

    `discover` reads the crawl's `VisitedSet` but never writes to it; the
    orchestrator commits URLs when it actually enqueues them. Every fault
    is local to one anchor (or one page) and is logged, never raised.
    """

    def __init__(
        self,
        url_resolver: Optional[UrlResolver] = None,
        pattern_matcher: Optional[PatternMatcher] = None,
        soup_factory: Optional[Callable[[Union[str, bytes]], BeautifulSoup]] = None,
    ):
        self.url_resolver = url_resolver or UrlResolver()
        self.pattern_matcher = pattern_matcher or PatternMatcher()
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def _parse(self, document: Document) -> Optional[BeautifulSoup]:
        if isinstance(document, BeautifulSoup):
            return document
        if not document:
            return None
        try:
            return self._soup_factory(document)
        except Exception:
            logger.exception("Could not parse document for link discovery")
            return None

    @staticmethod
    def _anchor_title(anchor, path: str) -> str:
        text = " ".join(anchor.get_text(" ", strip=True).split())
        return text or path

    def discover(
        self,
        document: Document,
        options: CrawlOptions,
        visited: VisitedSet,
        source_depth: int,
        page_url: Optional[str] = None,
    ) -> list[DiscoveredLink]:
        """Return the links on `document` that may be enqueued, in document order.

        `page_url` is the URL the document was fetched from and defaults to
        `options.base_url`. Hrefs resolve against it; a link is internal when
        its host is the host of `options.base_url`.

        `source_depth` is the depth of the page the document came from; each
        returned link carries `source_depth + 1`. Duplicate hrefs on one page
        are all returned; dedup happens when the caller commits to `visited`.
        """
        if not options.base_url:
            raise ValueError("options.base_url is required for link discovery")
        page_url = page_url or options.base_url
        if source_depth >= options.max_depth:
            logger.debug("Not discovering links on %s: depth %s reached max depth %s", page_url, source_depth, options.max_depth)
            return []

        soup = self._parse(document)
        if soup is None:
            return []

        anchors = soup.find_all("a")
        logger.debug("Found %s <a> elements on %s", len(anchors), page_url)

        next_depth = source_depth + 1
        links: list[DiscoveredLink] = []
        for anchor in anchors:
            href = anchor.get("href")
            if not href:
                continue

            try:
                resolved = self.url_resolver.resolve(href, page_url, options.base_url)
            except InvalidUrlError as e:
                logger.debug("Skipping (invalid) %s", e)
                continue

            if resolved.is_internal and not options.follow_internal_links:
                logger.debug("Skipping (internal links disabled) %s", resolved.url)
                continue
            if not resolved.is_internal and not options.follow_external_links:
                logger.debug("Skipping (external) %s", resolved.url)
                continue

            if not self.pattern_matcher.is_allowed(resolved.path, options.include_patterns, options.exclude_patterns):
                logger.debug("Skipping (pattern) %s | path %s", resolved.url, resolved.path)
                continue

            if visited.has(resolved.url):
                logger.debug("Skipping (visited) %s", resolved.url)
                continue

            if resolved.is_internal and visited.count_for_domain(resolved.host) >= options.max_pages_per_domain:
                logger.debug("Skipping (domain budget of %s reached) %s", options.max_pages_per_domain, resolved.url)
                continue

            links.append(
                DiscoveredLink(
                    url=resolved.url,
                    title=self._anchor_title(anchor, resolved.path),
                    depth=next_depth,
                    is_internal=resolved.is_internal,
                )
            )

        logger.info("Discovered %s eligible links on %s", len(links), page_url)
        return links
