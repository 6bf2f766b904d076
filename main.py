from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from typing import Optional

from sitecrawl.config import config_from_env
from sitecrawl.controller import CrawlController
from sitecrawl.errors import InvalidSeedUrl
from sitecrawl.metrics import MetricsCollector
from sitecrawl.models import PageEvent
from sitecrawl.output import FORMATS, JsonlStorage, generate_report, render, validate_result, write_result

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000

logger = logging.getLogger("sitecrawl")


def _print_event(event: PageEvent) -> None:
    log = {
        "event": event.kind,
        "url": event.url,
        "depth": event.depth,
        "processed": event.processed,
        "queued": event.queued,
        "latency_ms": event.latency_ms,
        "links_found": event.links_found,
        "error_type": event.error_type,
        "title": event.item.title if event.item else None,
    }
    print(json.dumps(log, ensure_ascii=False), file=sys.stderr)


def run_crawl(
    seed_url: str,
    output_path: Optional[str],
    fmt: str,
    stream_path: Optional[str],
    report: bool,
    max_pages: Optional[int],
    delay: Optional[float],
    max_depth: Optional[int],
    respect_robots: Optional[bool],
    placeholder: Optional[bool],
) -> int:
    config = config_from_env(
        seed_url,
        max_pages=max_pages,
        delay_seconds=delay,
        max_depth=max_depth,
        respect_robots=respect_robots,
        placeholder_on_failure=placeholder,
    )

    metrics = MetricsCollector()
    controller = CrawlController(config, listeners=[metrics, _print_event])

    storage = None
    if stream_path:
        storage = JsonlStorage(stream_path)
        controller.add_listener(storage)

    # Ctrl-C finishes the current page and keeps what was extracted.
    signal.signal(signal.SIGINT, lambda signum, frame: controller.stop())

    try:
        result = controller.run()
    finally:
        if storage:
            storage.close()

    for problem in validate_result(result):
        logger.warning("Output validation: %s", problem)

    if output_path:
        write_result(result, output_path, fmt)
        logger.info("Wrote %d items to %s", len(result.items), output_path)
    else:
        print(render(result, fmt))

    if report:
        print(generate_report(result), file=sys.stderr)

    stats = metrics.snapshot()
    print(
        f"\nDONE: pages={stats.pages_processed} items={stats.items_extracted} "
        f"listing={stats.listing_pages} skipped={stats.skipped} failed={stats.failures}",
        file=sys.stderr,
    )
    return 0


def serve(host: str, port: int) -> None:
    import uvicorn

    from sitecrawl.server import app

    uvicorn.run(app, host=host, port=port)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Crawl one domain and extract its readable content")
    parser.add_argument("url", nargs="?", help="Seed URL to start crawling from")

    parser.add_argument("--max-pages", type=int, default=None, help="Max pages to fetch (hard ceiling 1000)")
    parser.add_argument("--delay", type=float, default=None, help="Seconds between fetches")
    parser.add_argument("--max-depth", type=int, default=None, help="Max link depth from the seed")
    parser.add_argument("--respect-robots", action=argparse.BooleanOptionalAction, default=None, help="Advisory robots.txt check")
    parser.add_argument("--placeholder", action="store_true", default=None, help="Emit a placeholder item when the seed cannot be fetched")

    parser.add_argument("--output", default=None, help="Output file path (stdout when omitted)")
    parser.add_argument("--format", choices=FORMATS, default="json", help="Output format")
    parser.add_argument("--stream", default=None, help="Append items to this JSONL file as they are extracted")
    parser.add_argument("--report", action="store_true", help="Print a summary report")

    parser.add_argument("--serve", action="store_true", help="Run the HTTP endpoint instead of a single crawl")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Host for --serve")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port for --serve")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if args.serve:
        serve(args.host, args.port)
        return 0

    if not args.url:
        parser.error("a seed URL is required unless --serve is given")

    try:
        return run_crawl(
            seed_url=args.url,
            output_path=args.output,
            fmt=args.format,
            stream_path=args.stream,
            report=args.report,
            max_pages=args.max_pages,
            delay=args.delay,
            max_depth=args.max_depth,
            respect_robots=args.respect_robots,
            placeholder=args.placeholder,
        )
    except InvalidSeedUrl as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
