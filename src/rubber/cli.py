#!/usr/bin/env python3
# cli.py — command line front end for rubber

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from rubber import __version__
from rubber.config import DEFAULT_CONCURRENCY, DEFAULT_NUMBER, RunConfig
from rubber.core import run as run_load
from rubber.errors import ConfigurationError, ProtocolViolation
from rubber.logging_config import setup_logging
from rubber.models import Outcome, Success
from rubber.rendering import render_latency_histogram, render_summary
from rubber.utils import GracefulKiller

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rubber",
        description="Fire a fixed number of GET requests at a URL with bounded concurrency",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("url", help="The url to make a request to")
    parser.add_argument(
        "-n",
        "--number",
        type=int,
        default=DEFAULT_NUMBER,
        help="The number of requests to make",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help="The number of concurrent requests to make",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: $RUBBER_TIMEOUT_S or 30)",
    )
    parser.add_argument(
        "--histogram",
        action="store_true",
        help="Also print a latency histogram",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show a progress bar",
    )

    # Logging & Debugging
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., rubber.log)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


async def run(config: RunConfig, show_progress: bool = True, histogram: bool = False) -> int:
    killer = GracefulKiller(asyncio.current_task())
    latencies: list[float] = []

    progress = None
    task_id = None
    if show_progress:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=Console(stderr=True),
            transient=True,
        )
        progress.start()
        task_id = progress.add_task("[cyan]Requesting...", total=config.number)

    def on_completion(finished: int, total: int, outcome: Outcome) -> None:
        if isinstance(outcome, Success):
            latencies.append(outcome.duration)
        if progress is not None and task_id is not None:
            progress.update(task_id, completed=finished)

    try:
        stats = await run_load(
            config.to_target(),
            progress_callback=on_completion,
            request_timeout_s=config.timeout,
        )
    except asyncio.CancelledError:
        if not killer.kill_now:
            raise
        print("\n[!] Interrupted, in-flight requests cancelled.", file=sys.stderr)
        return 130
    finally:
        if progress is not None:
            progress.stop()

    print(render_summary(stats))
    if histogram:
        print()
        print(render_latency_histogram(stats, latencies))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level="DEBUG" if args.debug else "WARNING", log_file=args.log_file)

    try:
        config = RunConfig.load(
            url=args.url,
            number=args.number,
            concurrency=args.concurrency,
            timeout=args.timeout,
        )
    except ConfigurationError as e:
        print(f"Problem parsing arguments: {e}", file=sys.stderr)
        return 1

    print(f"Making a request to {config.url}", file=sys.stderr)
    try:
        code = asyncio.run(
            run(config, show_progress=not args.no_progress, histogram=args.histogram)
        )
    except ProtocolViolation as e:
        logger.error(f"Run aborted: {e}")
        print(f"Application error {e!r}", file=sys.stderr)
        return 1
    if code == 0:
        print("done", file=sys.stderr)
    return code


if __name__ == "__main__":
    sys.exit(main())
