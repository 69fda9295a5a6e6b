import logging
import re
from typing import Optional, Pattern

from contentcrawl.exceptions import PatternCompileError
from contentcrawl.utils.pattern_utils import PatternInput, split_patterns

logger = logging.getLogger(__name__)

PREFIX_SUFFIX = "**"


def glob_to_regex(pattern: str) -> str:
    """Translate a path glob into an anchored regular expression.

    `*` matches any run of characters and `?` a single character; everything
    else, `.` included, is matched literally.
    """
    parts = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "^" + "".join(parts) + "$"


class PatternMatcher:
    """Matches URL paths against include/exclude glob lists.

    A pattern ending in `**` is an open prefix: its literal part must be a
    prefix of the path. Any other pattern must match the whole path.
    """

    def __init__(self):
        self._compiled: dict[str, Optional[Pattern[str]]] = {}

    def _compile(self, pattern: str) -> Optional[Pattern[str]]:
        if pattern in self._compiled:
            return self._compiled[pattern]
        try:
            compiled = re.compile(glob_to_regex(pattern))
        except re.error as e:
            logger.warning("%s; treating it as non-matching", PatternCompileError(pattern, e))
            compiled = None
        self._compiled[pattern] = compiled
        return compiled

    def matches_pattern(self, path: str, pattern: str) -> bool:
        if pattern.endswith(PREFIX_SUFFIX):
            return path.startswith(pattern[: -len(PREFIX_SUFFIX)])
        compiled = self._compile(pattern)
        if compiled is None:
            return False
        return compiled.match(path) is not None

    def matches(self, path: str, patterns: PatternInput) -> bool:
        """Return True if any of the comma-separated `patterns` matches `path`."""
        return any(self.matches_pattern(path, p) for p in split_patterns(patterns))

    def is_allowed(self, path: str, include_patterns: PatternInput, exclude_patterns: PatternInput) -> bool:
        """Apply exclude-first filtering; an empty include list admits every path."""
        if self.matches(path, exclude_patterns):
            return False
        includes = split_patterns(include_patterns)
        if not includes:
            return True
        return any(self.matches_pattern(path, p) for p in includes)
