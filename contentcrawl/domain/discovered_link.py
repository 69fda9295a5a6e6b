from typing import NamedTuple


class DiscoveredLink(NamedTuple):
    """A link accepted by link discovery, ready to be enqueued by the caller."""
    url: str
    """Canonical absolute URL, also the dedup key"""

    title: str
    """Anchor text, or the URL path when the anchor has no text"""

    depth: int
    """Depth of the target page (source page depth + 1)"""

    is_internal: bool
    """True when the link's host equals the crawl's base host"""
