import logging

import pytest

from contentcrawl.exceptions import UserInputError
from contentcrawl.services.input_processor import (
    MAX_HTML_CHARS_TO_PROCESS,
    ContentCrawlerTypes,
    InputProcessor,
    process_input,
)


@pytest.fixture
def processor():
    return InputProcessor()


def test_process_input_selects_http_crawler_for_raw_http(processor):
    processed = processor.process_input({"query": "https://example.com", "scrapingTool": "raw-http", "maxRequestRetries": 2})
    opts = processed.content_crawler_options
    assert opts.type == ContentCrawlerTypes.HTTP
    assert opts.keep_alive is False
    assert opts.max_request_retries == 2
    assert opts.request_handler_timeout_secs == processed.options.request_timeout_secs


def test_process_input_selects_playwright_for_browser(processor):
    processed = processor.process_input({"query": "https://example.com", "scrapingTool": "browser-playwright"})
    opts = processed.content_crawler_options
    assert opts.type == ContentCrawlerTypes.PLAYWRIGHT
    assert opts.headless is True
    assert opts.browser == "firefox"


def test_search_crawler_options(processor):
    processed = processor.process_input({"query": "q", "serpMaxRetries": 4, "serpProxyGroup": "SHADER"})
    assert processed.search_crawler_options.max_request_retries == 4
    assert processed.search_crawler_options.proxy_groups == ("SHADER",)
    assert processed.search_crawler_options.keep_alive is False
    assert processed.search_crawler_options.desired_concurrency == 1


def test_scraper_settings_carry_traversal_limits(processor):
    processed = processor.process_input({"query": "q", "documentationMode": True, "includePatterns": ["/docs/**"]})
    settings = processed.content_scraper_settings
    assert settings.max_depth == 3
    assert settings.max_pages_per_domain == 50
    assert settings.enable_recursive_crawling is True
    assert settings.include_patterns == "/docs/**"
    assert settings.max_html_chars_to_process == MAX_HTML_CHARS_TO_PROCESS


def test_standby_input_prepares_every_crawler_without_query(processor):
    processed = processor.process_standby_input({})
    types = [o.type for o in processed.content_crawler_options]
    assert types == [ContentCrawlerTypes.PLAYWRIGHT, ContentCrawlerTypes.HTTP]
    assert all(o.keep_alive for o in processed.content_crawler_options)
    assert processed.search_crawler_options.keep_alive is True


def test_process_input_requires_query():
    with pytest.raises(UserInputError):
        process_input({})


def test_debug_mode_sets_package_log_level(processor):
    processor.process_input({"query": "q", "debugMode": True})
    assert logging.getLogger("contentcrawl").level == logging.DEBUG
    processor.process_input({"query": "q"})
    assert logging.getLogger("contentcrawl").level == logging.INFO
