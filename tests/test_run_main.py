"""
Tests for run.py main() with an injected container.
"""
import io
import json
from unittest.mock import Mock, patch

from run import build_parser, main, run_crawl
from contentcrawl.container import Container
from contentcrawl.domain import CrawledPage, CrawlResult


def _container_with_executor(result):
    container = Container()
    executor = Mock()
    executor.crawl.return_value = result
    container.crawl_executor.override(executor)
    return container, executor


def test_container_creates_services():
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")

    assert container.http_service().user_agent == "TestBot/1.0"
    assert container.link_discovery() is container.link_discovery()
    assert container.crawl_executor() is not container.crawl_executor()
    assert container.input_processor().normalizer is container.input_normalizer()


def test_crawl_command_prints_ndjson(tmp_path):
    input_file = tmp_path / "input.yaml"
    input_file.write_text("query: https://example.com/docs\nenableRecursiveCrawling: true\n")
    result = CrawlResult(pages=[CrawledPage("https://example.com/docs", 0, 200, "Docs")], stopped=False)
    container, executor = _container_with_executor(result)
    args = build_parser().parse_args(["crawl", "--input", str(input_file), "--max-depth", "1", "--include", "/docs/**"])
    out = io.StringIO()

    assert run_crawl(args, container, out=out) == 0

    options = executor.crawl.call_args.args[0]
    assert options.max_depth == 1
    assert options.include_patterns == "/docs/**"
    assert options.enable_recursive_crawling is True
    assert json.loads(out.getvalue()) == {"url": "https://example.com/docs", "depth": 0, "status_code": 200, "title": "Docs"}


def test_crawl_command_rejects_missing_query():
    container, executor = _container_with_executor(None)
    assert main(["crawl"], container=container) == 2
    executor.crawl.assert_not_called()


def test_crawl_command_rejects_non_url_query():
    container, executor = _container_with_executor(None)
    assert main(["crawl", "--url", "not a url"], container=container) == 2
    executor.crawl.assert_not_called()


def test_serve_starts_uvicorn():
    container = Container()
    with patch('run.uvicorn.run') as mock_uvicorn:
        assert main(["serve"], container=container) == 0
        assert mock_uvicorn.called
        assert mock_uvicorn.call_args.kwargs["port"] == int(container.config.CONTENTCRAWL_PORT())
