from typing import NamedTuple, Optional, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from contentcrawl.exceptions import InvalidUrlError

DEFAULT_ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}


class ResolvedUrl(NamedTuple):
    url: str
    path: str
    host: str
    is_internal: bool


def canonicalize(url: str) -> str:
    """Return the canonical form of an absolute URL.

    Scheme and host are lower-cased, the default port and the fragment are
    dropped and an empty path becomes `/`. The query is kept verbatim.
    Raises `ValueError` for URLs `urllib` cannot split (bad port, bad IPv6).
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    port = parts.port
    if ":" in host:
        host = f"[{host}]"
    netloc = host
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{host}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))


class UrlResolver:
    """Resolves hyperlink references against a page URL."""

    def __init__(self, allowed_schemes: Sequence[str] = DEFAULT_ALLOWED_SCHEMES):
        self.allowed_schemes = tuple(s.lower() for s in allowed_schemes)

    def base_host(self, base_url: str) -> str:
        try:
            host = urlsplit(base_url).hostname
        except ValueError as e:
            raise InvalidUrlError(base_url, str(e)) from e
        if not host:
            raise InvalidUrlError(base_url, "base URL has no host")
        return host.lower()

    def resolve(self, href: str, page_url: str, base_url: Optional[str] = None) -> ResolvedUrl:
        """Resolve `href` against `page_url`.

        `is_internal` compares the resolved host with the host of `base_url`,
        the crawl's base; it falls back to `page_url` when no base is given.
        Raises `InvalidUrlError` when the reference is empty, cannot be
        parsed, uses a non-crawlable scheme or resolves to a URL with no host.
        """
        if href is None or not href.strip():
            raise InvalidUrlError(href or "", "empty reference")
        base_host = self.base_host(base_url or page_url)
        try:
            absolute = urljoin(page_url, href.strip())
            parts = urlsplit(absolute)
            scheme = parts.scheme.lower()
            if scheme not in self.allowed_schemes:
                raise InvalidUrlError(href, f"unsupported scheme {scheme or '(none)'!r}")
            host = (parts.hostname or "").lower()
            if not host:
                raise InvalidUrlError(href, "no host")
            url = canonicalize(absolute)
        except ValueError as e:
            raise InvalidUrlError(href, str(e)) from e
        return ResolvedUrl(url=url, path=parts.path or "/", host=host, is_internal=host == base_host)
