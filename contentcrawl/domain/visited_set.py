import threading
from collections import Counter
from typing import Iterator, Optional
from urllib.parse import urlsplit


def _host_of(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


class VisitedSet:
    """
    Canonical URLs already enqueued or processed during one crawl.

    One instance is created per crawl by the orchestrator and passed by
    reference to every discovery call; link discovery only reads it.

    All operations take an internal lock, and `add_if_absent` is the atomic
    check-and-set the orchestrator uses when committing an enqueue, so two
    concurrent discovery calls can never both commit the same URL.

    `count_for_domain` returns the live per-host count at the time of the
    call. Discovery does not hold the lock between reading the count and
    emitting a link, so concurrent calls may admit a few links past the
    domain budget. That over-admission is accepted in exchange for not
    serialising whole discovery calls.
    """

    def __init__(self, urls: Optional[list[str]] = None):
        self._lock = threading.Lock()
        self._urls: set[str] = set()
        self._per_domain: Counter = Counter()
        for url in urls or []:
            self.add(url)

    def has(self, url: str) -> bool:
        with self._lock:
            return url in self._urls

    def add(self, url: str) -> None:
        """Commit a URL. Adding the same URL twice counts it once."""
        self.add_if_absent(url)

    def add_if_absent(self, url: str) -> bool:
        """Commit `url` unless already present; return True if it was added."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            self._per_domain[_host_of(url)] += 1
            return True

    def count_for_domain(self, domain: str) -> int:
        with self._lock:
            return self._per_domain[(domain or "").lower()]

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.has(url)

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._urls))
