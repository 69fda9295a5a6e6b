"""Crawl result data model."""
from typing import NamedTuple, Optional


class CrawledPage(NamedTuple):
    """A page fetched during a crawl."""
    url: str
    depth: int
    status_code: int
    title: str
    html: Optional[str] = None


class CrawlResult(NamedTuple):
    """Result of a crawl operation.

    Provides feedback about what happened during the crawl,
    enabling callers to log metrics and distinguish success from cancellation.
    """
    pages: list
    """`CrawledPage` entries in the order they were fetched"""

    stopped: bool
    """True if crawl was stopped early via stop_event, False if completed normally"""

    @property
    def pages_crawled(self) -> int:
        return len(self.pages)
