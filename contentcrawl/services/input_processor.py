from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from contentcrawl.domain.crawl_options import CrawlOptions
from contentcrawl.services.input_normalizer import InputNormalizer

logger = logging.getLogger(__name__)

MAX_HTML_CHARS_TO_PROCESS = 1_500_000
BROWSER_RETIRE_INACTIVE_AFTER_SECS = 60


class ContentCrawlerTypes:
    PLAYWRIGHT = "playwright"
    HTTP = "http"


@dataclass(frozen=True)
class SearchCrawlerOptions:
    """Settings handed to the search-result crawler."""

    keep_alive: bool
    max_request_retries: int
    proxy_groups: tuple[str, ...]
    desired_concurrency: int = 1


@dataclass(frozen=True)
class ContentCrawlerOptions:
    """Settings handed to one content crawler (HTTP or headless browser)."""

    type: str
    keep_alive: bool
    max_request_retries: int
    request_handler_timeout_secs: int
    desired_concurrency: int
    proxy_configuration: dict[str, Any] = field(default_factory=dict)
    headless: Optional[bool] = None
    browser: Optional[str] = None
    retire_inactive_browser_after_secs: Optional[int] = None


@dataclass(frozen=True)
class ContentScraperSettings:
    """Per-page scraping settings, including the recursive traversal limits."""

    debug_mode: bool
    dynamic_content_wait_secs: int
    html_transformer: str
    max_html_chars_to_process: int
    output_formats: tuple[str, ...]
    readable_text_char_threshold: int
    remove_cookie_warnings: bool
    remove_elements_css_selector: str
    documentation_mode: bool
    enable_recursive_crawling: bool
    max_depth: int
    max_pages_per_domain: int
    follow_internal_links: bool
    follow_external_links: bool
    include_patterns: str
    exclude_patterns: str


@dataclass(frozen=True)
class ProcessedInput:
    options: CrawlOptions
    search_crawler_options: SearchCrawlerOptions
    content_crawler_options: Union[ContentCrawlerOptions, tuple[ContentCrawlerOptions, ...]]
    content_scraper_settings: ContentScraperSettings


def create_playwright_crawler_options(options: CrawlOptions, keep_alive: bool = True) -> ContentCrawlerOptions:
    return ContentCrawlerOptions(
        type=ContentCrawlerTypes.PLAYWRIGHT,
        keep_alive=keep_alive,
        max_request_retries=options.max_request_retries,
        request_handler_timeout_secs=options.request_timeout_secs,
        desired_concurrency=options.desired_concurrency,
        proxy_configuration=dict(options.proxy_configuration),
        headless=True,
        browser="firefox",
        retire_inactive_browser_after_secs=BROWSER_RETIRE_INACTIVE_AFTER_SECS,
    )


def create_http_crawler_options(options: CrawlOptions, keep_alive: bool = True) -> ContentCrawlerOptions:
    return ContentCrawlerOptions(
        type=ContentCrawlerTypes.HTTP,
        keep_alive=keep_alive,
        max_request_retries=options.max_request_retries,
        request_handler_timeout_secs=options.request_timeout_secs,
        desired_concurrency=options.desired_concurrency,
        proxy_configuration=dict(options.proxy_configuration),
    )


class InputProcessor:
    """Turn raw input into the option bundles the crawlers start with."""

    def __init__(self, normalizer: Optional[InputNormalizer] = None, log_name: str = "contentcrawl"):
        self.normalizer = normalizer or InputNormalizer()
        self.log_name = log_name

    def _apply_log_level(self, options: CrawlOptions) -> None:
        logging.getLogger(self.log_name).setLevel(logging.DEBUG if options.debug_mode else logging.INFO)

    def _process_internal(self, raw_input: Optional[Mapping[str, Any]], standby_init: bool):
        options = self.normalizer.normalize(raw_input, standby_init=standby_init)
        self._apply_log_level(options)

        search_crawler_options = SearchCrawlerOptions(
            keep_alive=standby_init,
            max_request_retries=options.serp_max_retries,
            proxy_groups=(options.serp_proxy_group,),
        )
        scraper_settings = ContentScraperSettings(
            debug_mode=options.debug_mode,
            dynamic_content_wait_secs=options.dynamic_content_wait_secs,
            html_transformer=options.html_transformer,
            max_html_chars_to_process=MAX_HTML_CHARS_TO_PROCESS,
            output_formats=options.output_formats,
            readable_text_char_threshold=options.readable_text_char_threshold,
            remove_cookie_warnings=options.remove_cookie_warnings,
            remove_elements_css_selector=options.remove_elements_css_selector,
            documentation_mode=options.documentation_mode,
            enable_recursive_crawling=options.enable_recursive_crawling,
            max_depth=options.max_depth,
            max_pages_per_domain=options.max_pages_per_domain,
            follow_internal_links=options.follow_internal_links,
            follow_external_links=options.follow_external_links,
            include_patterns=options.include_patterns,
            exclude_patterns=options.exclude_patterns,
        )
        return options, search_crawler_options, scraper_settings

    def process_input(self, raw_input: Optional[Mapping[str, Any]]) -> ProcessedInput:
        """Process input for a single crawl; one content crawler is chosen by `scrapingTool`."""
        options, search_opts, scraper_settings = self._process_internal(raw_input, standby_init=False)
        if options.scraping_tool == "raw-http":
            content_opts = create_http_crawler_options(options, keep_alive=False)
        else:
            content_opts = create_playwright_crawler_options(options, keep_alive=False)
        return ProcessedInput(options, search_opts, content_opts, scraper_settings)

    def process_standby_input(self, raw_input: Optional[Mapping[str, Any]]) -> ProcessedInput:
        """Process input for standby startup, preparing every crawler type at once.

        The query is not required here; it arrives with each request.
        """
        options, search_opts, scraper_settings = self._process_internal(raw_input, standby_init=True)
        content_opts = (
            create_playwright_crawler_options(options),
            create_http_crawler_options(options),
        )
        logger.info("Prepared %s content crawler configurations for standby mode", len(content_opts))
        return ProcessedInput(options, search_opts, content_opts, scraper_settings)


def process_input(raw_input: Optional[Mapping[str, Any]]) -> ProcessedInput:
    return InputProcessor().process_input(raw_input)


def process_standby_input(raw_input: Optional[Mapping[str, Any]]) -> ProcessedInput:
    return InputProcessor().process_standby_input(raw_input)
