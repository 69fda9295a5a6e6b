import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from contentcrawl.exceptions import UserInputError
from contentcrawl.services.input_processor import InputProcessor

logger = logging.getLogger(__name__)


class CrawlRequest(BaseModel):
    query: str
    input: dict[str, Any] = Field(default_factory=dict)


def create_crawls_router(input_processor: InputProcessor, executor_factory, standby_input: Optional[dict] = None):
    """Create the crawl router.

    `standby_input` holds the raw input the server started with; each request
    overrides it with its own `input` fields and `query`.
    """
    router = APIRouter(tags=["Crawls"])
    base_input = dict(standby_input or {})

    @router.post("/crawl")
    def crawl(req: CrawlRequest):
        raw = {**base_input, **req.input, "query": req.query}
        try:
            processed = input_processor.process_input(raw)
        except UserInputError as e:
            raise HTTPException(status_code=400, detail=str(e))

        options = processed.options
        if not options.base_url:
            # search lookups are not supported; the query must be a page URL
            raise HTTPException(status_code=400, detail="The `query` parameter must be an absolute http(s) URL.")

        executor = executor_factory()
        try:
            result = executor.crawl(options)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        return {
            "stopped": result.stopped,
            "pages": [
                {"url": p.url, "depth": p.depth, "status_code": p.status_code, "title": p.title}
                for p in result.pages
            ],
        }

    return router
