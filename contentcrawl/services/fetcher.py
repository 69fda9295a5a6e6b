from __future__ import annotations

import logging
from typing import Protocol

from contentcrawl.domain.http_response import HttpResponse
from contentcrawl.exceptions import HttpFetchError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Fetch a URL and return a normalized HTTP-like response."""

    def fetch(self, url: str, stop_event=None) -> HttpResponse: ...


class HttpServiceFetcher:
    """Fetcher backed by `HttpService`, retrying transport failures.

    `max_retries` extra attempts are made after the first failure; a stop
    request ends the retry loop early.
    """

    def __init__(self, http_service, max_retries: int = 0, timeout: int = None):
        self._http_service = http_service
        self.max_retries = max(0, int(max_retries))
        self.timeout = timeout

    def fetch(self, url: str, stop_event=None) -> HttpResponse:
        attempt = 0
        while True:
            try:
                return self._http_service.fetch(url, timeout=self.timeout)
            except HttpFetchError:
                stopped = stop_event is not None and stop_event.is_set()
                if attempt >= self.max_retries or stopped:
                    raise
                attempt += 1
                logger.info("Retrying %s (attempt %s of %s)", url, attempt, self.max_retries)


class HttpFetcherFactory:
    """Builds a fetcher honouring a crawl's retry and timeout settings."""

    def __init__(self, http_service):
        self._http_service = http_service

    def __call__(self, options) -> HttpServiceFetcher:
        return HttpServiceFetcher(
            self._http_service,
            max_retries=options.max_request_retries,
            timeout=options.request_timeout_secs,
        )
