"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from contentcrawl import config as env
from contentcrawl.services.crawl_executor import CrawlExecutor
from contentcrawl.services.fetcher import HttpFetcherFactory
from contentcrawl.services.http_service import HttpService
from contentcrawl.services.input_normalizer import InputNormalizer
from contentcrawl.services.input_processor import InputProcessor
from contentcrawl.services.input_schema import default_input_schema
from contentcrawl.services.link_discovery import LinkDiscoveryService
from contentcrawl.services.pattern_matcher import PatternMatcher
from contentcrawl.services.url_resolver import UrlResolver


# Environment variables used by the container (read via `contentcrawl.config` helpers).
#
# USER_AGENT (str, default: "ContentCrawl/0.1")
#   User-Agent header for outbound HTTP requests.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Fallback timeout for outbound HTTP requests when a crawl sets none.
#
# CRAWL_DELAY (float seconds, default: 0.0)
#   Politeness delay between crawl levels.
#
# CONTENTCRAWL_HOST / CONTENTCRAWL_PORT (default: 0.0.0.0 / 8000)
#   Bind address of the standby server.
ENV = {
    "USER_AGENT": env.user_agent(),
    "HTTP_TIMEOUT": env.http_timeout_seconds(),
    "CRAWL_DELAY": env.get_float_env("CRAWL_DELAY", 0.0),
    "CONTENTCRAWL_HOST": env.server_host(),
    "CONTENTCRAWL_PORT": env.server_port(),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for ContentCrawl."""

    config = providers.Configuration(default=ENV)

    input_schema = providers.Singleton(default_input_schema)

    input_normalizer = providers.Singleton(
        InputNormalizer,
        schema=input_schema,
    )

    input_processor = providers.Singleton(
        InputProcessor,
        normalizer=input_normalizer,
    )

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    fetcher_factory = providers.Singleton(
        HttpFetcherFactory,
        http_service=http_service,
    )

    url_resolver = providers.Singleton(UrlResolver)

    pattern_matcher = providers.Singleton(PatternMatcher)

    link_discovery = providers.Singleton(
        LinkDiscoveryService,
        url_resolver=url_resolver,
        pattern_matcher=pattern_matcher,
    )

    crawl_executor = providers.Factory(
        CrawlExecutor,
        fetcher_factory=fetcher_factory,
        link_discovery=link_discovery,
        delay_seconds=config.CRAWL_DELAY.as_(float),
    )
