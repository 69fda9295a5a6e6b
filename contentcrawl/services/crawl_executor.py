import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from contentcrawl.domain.crawl_options import CrawlOptions
from contentcrawl.domain.crawl_result import CrawledPage, CrawlResult
from contentcrawl.domain.discovered_link import DiscoveredLink
from contentcrawl.domain.http_response import HttpResponse
from contentcrawl.domain.visited_set import VisitedSet
from contentcrawl.exceptions import HttpFetchError, InvalidUrlError
from contentcrawl.services.fetcher import Fetcher
from contentcrawl.services.link_discovery import LinkDiscoveryService

logger = logging.getLogger(__name__)


class CrawlExecutor:
    """Executes a breadth-first crawl from one start page.

    This class owns the crawl control-flow: the depth cap, cancellation
    checks, fetching each level with a worker pool, delegating link
    discovery and committing accepted links to the crawl's `VisitedSet`.
    It does NOT construct dependencies (that stays in the DI layer).
    """

    def __init__(
        self,
        *,
        fetcher_factory: Callable[[CrawlOptions], Fetcher],
        link_discovery: Optional[LinkDiscoveryService] = None,
        delay_seconds: float = 0,
        keep_html: bool = False,
    ):
        self.fetcher_factory = fetcher_factory
        self.link_discovery = link_discovery or LinkDiscoveryService()
        self.delay_seconds = delay_seconds
        self.keep_html = keep_html

    def _is_stopped(self, stop_event) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def _fetch(self, fetcher: Fetcher, url: str, stop_event=None) -> Optional[HttpResponse]:
        try:
            if self._is_stopped(stop_event):
                logger.info("Fetch cancelled for %s", url)
                return None
            return fetcher.fetch(url, stop_event=stop_event)
        except HttpFetchError as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            return None
        except Exception as e:
            logger.error("Fetch error for %s: %s", url, e, exc_info=True)
            return None

    def _process_page(
        self, fetcher: Fetcher, url: str, depth: int, options: CrawlOptions, visited: VisitedSet, stop_event=None
    ) -> tuple[Optional[CrawledPage], list[DiscoveredLink]]:
        response = self._fetch(fetcher, url, stop_event)
        if response is None:
            return None, []

        soup = BeautifulSoup(response.text or "", "html.parser")
        title = soup.title.get_text(strip=True) if soup.title else ""
        page = CrawledPage(
            url=url,
            depth=depth,
            status_code=response.status_code,
            title=title,
            html=response.text if self.keep_html else None,
        )
        logger.info("Fetched %s -> status %s (depth %s)", url, response.status_code, depth)

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning("Non-success status for %s: %s", url, response.status_code)
            return page, []
        if not options.enable_recursive_crawling or depth >= options.max_depth:
            return page, []

        try:
            links = self.link_discovery.discover(soup, options, visited, depth, page_url=url)
        except Exception:
            logger.exception("Link discovery failed for %s", url)
            links = []
        return page, links

    def _commit(self, link: DiscoveredLink, options: CrawlOptions, visited: VisitedSet) -> bool:
        """Commit a discovered link to `visited`; return True if it should be enqueued."""
        if link.depth > options.max_depth:
            return False
        if link.is_internal:
            host = (urlsplit(link.url).hostname or "").lower()
            if visited.count_for_domain(host) >= options.max_pages_per_domain:
                logger.debug("Not enqueuing %s: domain budget exhausted", link.url)
                return False
        return visited.add_if_absent(link.url)

    def crawl(self, options: CrawlOptions, start_url: Optional[str] = None, stop_event=None) -> CrawlResult:
        start = start_url or options.base_url
        if not start:
            raise ValueError("a start URL is required for crawl")
        try:
            start = self.link_discovery.url_resolver.resolve(start, start).url
        except InvalidUrlError as e:
            raise ValueError(f"invalid start URL: {e}") from e
        if not options.base_url:
            options = options.with_base_url(start)

        visited = VisitedSet()
        visited.add(start)
        fetcher = self.fetcher_factory(options)

        pages: list[CrawledPage] = []
        stopped = False
        frontier = [(start, 0)]
        with ThreadPoolExecutor(max_workers=max(1, options.desired_concurrency)) as pool:
            while frontier:
                if self._is_stopped(stop_event):
                    logger.info("Crawl cancelled with %s pages queued", len(frontier))
                    stopped = True
                    break

                results = list(pool.map(
                    lambda item: self._process_page(fetcher, item[0], item[1], options, visited, stop_event),
                    frontier,
                ))

                next_frontier = []
                for page, links in results:
                    if page is None:
                        continue
                    pages.append(page)
                    for link in links:
                        if self._commit(link, options, visited):
                            next_frontier.append((link.url, link.depth))
                logger.debug("Level done: %s pages fetched so far, %s queued", len(pages), len(next_frontier))

                frontier = next_frontier
                if frontier and self.delay_seconds:
                    time.sleep(self.delay_seconds)

        if self._is_stopped(stop_event):
            stopped = True
        return CrawlResult(pages=pages, stopped=stopped)
