"""src/mycurl/cli.py

Command-line entry point: ``mycurl [--cache] [-o FILE|-] URL``.

Prints the decomposed URL, fetches the resource, writes the body to the
output target, and prints a timing/throughput line. When the body goes to
stdout (``-o -``) the two report lines go to stderr instead.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from mycurl.cache.store import ResponseCache
from mycurl.client.facade import Client
from mycurl.config import ClientConfig
from mycurl.exceptions import MyCurlError, URLError
from mycurl.http.url import URL, URLParseFailure, parse
from mycurl.utils.report import (
    Stopwatch,
    TransferStats,
    format_stats,
    format_url_summary,
)
from mycurl.utils.timing import Timeout
from mycurl.version import __version__

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)

STDOUT_TARGET = "-"


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the ``mycurl`` command."""
    parser = argparse.ArgumentParser(
        prog="mycurl",
        description="Fetch an http/https URL and report size and throughput.",
    )
    parser.add_argument("url", help="http:// or https:// URL to fetch")
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="write the body to FILE, or to stdout for '-' (default: discard)",
    )
    parser.add_argument(
        "--cache",
        action="store_true",
        help="serve from and store into the on-disk response cache",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        help="cache directory (default: $MYCURL_CACHE_DIR or ~/.cache/mycurl)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="connect and read timeout (default: $MYCURL_TIMEOUT or 10)",
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        metavar="N",
        help="redirects to follow (default: $MYCURL_MAX_REDIRECTS or 10)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log progress to stderr (-vv for debug output)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def configure_logging(verbosity: int) -> None:
    """WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Environment configuration with command-line overrides applied."""
    config = ClientConfig.from_env()
    if args.timeout is not None:
        if args.timeout <= 0:
            raise ValueError("--timeout must be positive")
        config.timeout = Timeout.from_float(args.timeout)
    if args.max_redirects is not None:
        if args.max_redirects < 0:
            raise ValueError("--max-redirects must be >= 0")
        config.max_redirects = args.max_redirects
    if args.cache_dir is not None:
        config.cache_dir = args.cache_dir
    return config


def write_body(body: bytes, output: Optional[str]) -> None:
    """Write ``body`` to the output target; no target discards it."""
    if not output:
        return
    if output == STDOUT_TARGET:
        sys.stdout.buffer.write(body)
        sys.stdout.flush()
        return
    Path(output).write_bytes(body)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command; returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    report: TextIO = sys.stderr if args.output == STDOUT_TARGET else sys.stdout

    result = parse(args.url)
    if isinstance(result, URLParseFailure):
        print(f"ERROR URL parse error: {result.reason}", file=report)
        return 1
    url: URL = result

    print(format_url_summary(url, args.output), file=report)

    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"ERROR {exc}", file=report)
        return 1

    cache = ResponseCache(config.cache_dir) if args.cache else None
    client = Client(config, cache=cache)

    stopwatch = Stopwatch().start()
    try:
        response = client.fetch(url)
    except URLError as exc:
        # Redirect target that could not be decomposed
        print(f"ERROR URL parse error: {exc.reason}", file=report)
        return 1
    except MyCurlError as exc:
        logger.debug("Request failed", exc_info=True)
        print(f"ERROR {exc}", file=report)
        return 1
    elapsed = stopwatch.stop()

    if not response.ok:
        logger.warning("%s returned %s", url, response.status_line)

    try:
        write_body(response.body, args.output)
    except OSError as exc:
        print(f"ERROR cannot write {args.output}: {exc}", file=report)
        return 1

    stats = TransferStats(url=args.url, size=len(response.body), elapsed=elapsed)
    print(format_stats(stats), file=report)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
