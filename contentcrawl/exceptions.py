"""Custom exceptions for ContentCrawl services."""


class UserInputError(Exception):
    """Raised when a crawl input field is missing or holds an invalid value."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


ValidationError = UserInputError


class InvalidUrlError(Exception):
    """Raised when a hyperlink reference cannot be resolved to a crawlable URL."""

    def __init__(self, href: str, reason: str = "cannot be parsed"):
        self.href = href
        self.reason = reason
        super().__init__(f"Invalid URL {href!r}: {reason}")


class PatternCompileError(Exception):
    """Raised when an include/exclude glob cannot be compiled."""

    def __init__(self, pattern: str, original: Exception):
        self.pattern = pattern
        self.original = original
        super().__init__(f"Could not compile pattern {pattern!r}: {original}")


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")
