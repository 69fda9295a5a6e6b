import dataclasses

import pytest

from contentcrawl.domain import CrawlOptions


def test_pattern_lists_are_split_and_trimmed():
    options = CrawlOptions(include_patterns=" /docs/** , ,/api/*", exclude_patterns="")
    assert options.include_pattern_list == ("/docs/**", "/api/*")
    assert options.exclude_pattern_list == ()


def test_with_base_url_returns_copy():
    options = CrawlOptions(max_depth=3)
    bound = options.with_base_url("https://example.com/docs")
    assert bound.base_url == "https://example.com/docs"
    assert bound.max_depth == 3
    assert options.base_url is None


def test_options_are_immutable():
    options = CrawlOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.max_depth = 5
