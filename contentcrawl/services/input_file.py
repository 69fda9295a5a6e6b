import os
from typing import Any

import yaml


def load_input_file(path: str) -> dict[str, Any]:
    """Load raw crawl input from a YAML or JSON file.

    JSON is a subset of YAML, so both are read with `yaml.safe_load`.
    An empty file yields an empty mapping.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Input file {path} must contain a mapping, got {type(data).__name__}")
    return data
