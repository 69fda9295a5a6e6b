import requests
from typing import Callable, Optional

from contentcrawl.domain.http_response import HttpResponse
from contentcrawl.exceptions import HttpFetchError


class HttpService:
    """Shared page client for every crawl the process runs.

    One instance is wired by the container with the process-wide user agent
    and the `HTTP_TIMEOUT` fallback. Each crawl passes its own
    `request_timeout_secs` per call, so crawls with different input share
    the client without rebuilding it. `http_client` has the signature of
    `requests.get`.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str, timeout: Optional[int] = None) -> HttpResponse:
        """GET `url` with the crawl's timeout, or the service fallback when unset.

        Any HTTP status is returned as-is; only transport failures raise
        `HttpFetchError`.
        """
        try:
            resp = self.http_client(url, headers={"User-Agent": self.user_agent}, timeout=timeout or self.timeout)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        content_type = resp.headers.get("Content-Type") if hasattr(resp, "headers") else None
        return HttpResponse(resp.status_code, resp.text, content_type)
