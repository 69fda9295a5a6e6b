import argparse
import json
import logging
import sys

import uvicorn

from contentcrawl.container import Container
from contentcrawl.exceptions import UserInputError
from contentcrawl.services.input_file import load_input_file

logger = logging.getLogger("contentcrawl")


def _build_raw_input(args) -> dict:
    raw = load_input_file(args.input) if args.input else {}
    if args.url:
        raw["query"] = args.url
    if args.max_depth is not None:
        raw["maxDepth"] = args.max_depth
    if args.max_pages_per_domain is not None:
        raw["maxPagesPerDomain"] = args.max_pages_per_domain
    if args.include:
        raw["includePatterns"] = args.include
    if args.exclude:
        raw["excludePatterns"] = args.exclude
    if args.recursive:
        raw["enableRecursiveCrawling"] = True
    if args.documentation_mode:
        raw["documentationMode"] = True
    if args.debug:
        raw["debugMode"] = True
    return raw


def run_crawl(args, container: Container, out=None) -> int:
    out = out or sys.stdout
    try:
        processed = container.input_processor().process_input(_build_raw_input(args))
    except UserInputError as e:
        logger.error("Invalid input: %s", e)
        return 2

    options = processed.options
    if not options.base_url:
        logger.error("The `query` parameter must be an absolute http(s) URL to crawl.")
        return 2

    result = container.crawl_executor().crawl(options)
    for page in result.pages:
        out.write(json.dumps({"url": page.url, "depth": page.depth, "status_code": page.status_code, "title": page.title}) + "\n")
    logger.info("Crawl finished: %s pages (stopped=%s)", result.pages_crawled, result.stopped)
    return 0


def run_serve(args, container: Container) -> int:
    from contentcrawl.api.server import create_app

    standby_input = load_input_file(args.input) if args.input else {}
    try:
        app = create_app(container, standby_input)
    except UserInputError as e:
        logger.error("Invalid standby input: %s", e)
        return 2
    uvicorn.run(app, host=container.config.CONTENTCRAWL_HOST(), port=int(container.config.CONTENTCRAWL_PORT()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contentcrawl", description="Recursive web-content crawler")
    sub = parser.add_subparsers(dest="command", required=True)

    crawl = sub.add_parser("crawl", help="crawl from a start URL and print pages as NDJSON")
    crawl.add_argument("--input", help="YAML or JSON input file")
    crawl.add_argument("--url", help="start URL (overrides `query` from the input file)")
    crawl.add_argument("--max-depth", type=int)
    crawl.add_argument("--max-pages-per-domain", type=int)
    crawl.add_argument("--include", help="comma-separated include patterns")
    crawl.add_argument("--exclude", help="comma-separated exclude patterns")
    crawl.add_argument("--recursive", action="store_true")
    crawl.add_argument("--documentation-mode", action="store_true")
    crawl.add_argument("--debug", action="store_true")

    serve = sub.add_parser("serve", help="start the standby HTTP server")
    serve.add_argument("--input", help="YAML or JSON standby input file")
    return parser


def main(argv=None, container: Container = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    container = container or Container()
    if args.command == "serve":
        return run_serve(args, container)
    return run_crawl(args, container)


if __name__ == '__main__':
    sys.exit(main())
