"""Domain objects for ContentCrawl - explicit re-exports to satisfy linters."""
from .crawl_options import CrawlOptions as CrawlOptions
from .discovered_link import DiscoveredLink as DiscoveredLink
from .visited_set import VisitedSet as VisitedSet
from .crawl_result import CrawlResult as CrawlResult, CrawledPage as CrawledPage
from .http_response import HttpResponse as HttpResponse

__all__ = ["CrawlOptions", "DiscoveredLink", "VisitedSet", "CrawlResult", "CrawledPage", "HttpResponse"]
