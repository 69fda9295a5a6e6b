from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from contentcrawl.utils.pattern_utils import split_patterns


@dataclass(frozen=True)
class CrawlOptions:
    """Validated crawl settings, immutable for the lifetime of a crawl.

    Produced by the input normalizer. Numeric fields are already within their
    declared bounds and pattern fields are comma-joined strings. `base_url` is
    the crawl base; it is bound once, before the crawl starts, with
    `with_base_url` when the input did not provide one.
    """

    query: Optional[str] = None
    base_url: Optional[str] = None
    max_results: int = 3
    output_formats: tuple[str, ...] = ("markdown",)
    request_timeout_secs: int = 40
    serp_proxy_group: str = "GOOGLE_SERP"
    serp_max_retries: int = 2
    proxy_configuration: dict[str, Any] = field(default_factory=dict)
    scraping_tool: str = "raw-http"
    remove_elements_css_selector: str = ""
    html_transformer: str = "none"
    desired_concurrency: int = 5
    max_request_retries: int = 1
    dynamic_content_wait_secs: int = 20
    readable_text_char_threshold: int = 100
    remove_cookie_warnings: bool = True
    debug_mode: bool = False
    documentation_mode: bool = False
    enable_recursive_crawling: bool = False
    max_depth: int = 2
    max_pages_per_domain: int = 20
    follow_internal_links: bool = True
    follow_external_links: bool = False
    include_patterns: str = ""
    exclude_patterns: str = ""

    @property
    def include_pattern_list(self) -> tuple[str, ...]:
        return split_patterns(self.include_patterns)

    @property
    def exclude_pattern_list(self) -> tuple[str, ...]:
        return split_patterns(self.exclude_patterns)

    def with_base_url(self, base_url: str) -> "CrawlOptions":
        return replace(self, base_url=base_url)
