import logging
from typing import Optional

from fastapi import FastAPI

from contentcrawl.api.routers import create_crawls_router, create_systems_router
from contentcrawl.container import ENV, Container

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, standby_input: Optional[dict] = None) -> FastAPI:
    """Build the standby FastAPI app.

    Standby input is processed once at startup without requiring a query.
    Invalid standby input raises `UserInputError` before the app is built.
    """
    container = container or Container()
    input_processor = container.input_processor()
    standby = input_processor.process_standby_input(standby_input or {})
    logger.info(
        "Standby ready: recursive=%s max_depth=%s max_pages_per_domain=%s",
        standby.options.enable_recursive_crawling,
        standby.options.max_depth,
        standby.options.max_pages_per_domain,
    )

    app = FastAPI(title="ContentCrawl")
    app.include_router(create_systems_router(ENV, standby.content_scraper_settings))
    app.include_router(create_crawls_router(input_processor, container.crawl_executor, standby_input))
    app.state.standby = standby
    return app
