from typing import Iterable, Optional, Union

PatternInput = Union[str, Iterable[str], None]


def join_patterns(value: PatternInput) -> str:
    """Return the comma-joined form of a pattern field given as a string or a list."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return ",".join(str(v) for v in value)


def split_patterns(value: PatternInput) -> tuple[str, ...]:
    """Split a comma-separated pattern field into trimmed, non-empty entries."""
    if not value:
        return ()
    if isinstance(value, str):
        parts: Iterable[Optional[str]] = value.split(",")
    else:
        parts = value
    return tuple(p.strip() for p in parts if p and p.strip())
