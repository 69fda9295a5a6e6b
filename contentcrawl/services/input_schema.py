import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "input_schema.yaml")


@dataclass(frozen=True)
class InputField:
    """Declared contract for one input field."""

    name: str
    type: str
    default: Any = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    enum: Optional[tuple] = None


class InputSchema:
    """Field contracts keyed by input field name."""

    def __init__(self, fields: dict[str, InputField]):
        self._fields = dict(fields)

    def __getitem__(self, name: str) -> InputField:
        return self._fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def names(self) -> list[str]:
        return list(self._fields)

    def default(self, name: str) -> Any:
        return self._fields[name].default


def parse_input_schema(data: dict) -> InputSchema:
    """Build an `InputSchema` from a loaded YAML/JSON document.

    The document must contain a `properties` mapping; each property may
    declare `type`, `default`, `minimum`, `maximum` and `enum`.
    """
    properties = (data or {}).get("properties")
    if not isinstance(properties, dict):
        raise ValueError("input schema must contain a 'properties' mapping")

    fields = {}
    for name, spec in properties.items():
        spec = spec or {}
        enum = spec.get("enum")
        fields[name] = InputField(
            name=name,
            type=spec.get("type", "string"),
            default=spec.get("default"),
            minimum=spec.get("minimum"),
            maximum=spec.get("maximum"),
            enum=tuple(enum) if enum is not None else None,
        )
    return InputSchema(fields)


def load_input_schema(path: Optional[str] = None) -> InputSchema:
    full = path or DEFAULT_SCHEMA_PATH
    with open(full, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    logger.debug("Loaded input schema from %s", full)
    return parse_input_schema(data)


@lru_cache(maxsize=1)
def default_input_schema() -> InputSchema:
    return load_input_schema()
