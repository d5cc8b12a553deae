"""Capture replay harness: decode every line of an FSD capture file."""

import argparse
import logging
import sys
import time
from collections import Counter
from pathlib import Path

from fsd_messages.codec import DecodeResult, decode_lines
from fsd_messages.const import FSD_METRICS_PORT
from fsd_messages.logging_abstraction import get_logger
from fsd_messages.metrics import start_metrics_server

logger = get_logger(__name__)


def summarize(results: list[DecodeResult], elapsed: float) -> str:
    """Build the one-line summary printed after a replay."""
    failed = sum(1 for result in results if not result.ok)
    total = len(results)
    rate = total / elapsed if elapsed > 0 else 0.0
    return f"Decoded {total - failed}/{total} lines ({failed} failed) in {elapsed:.3f}s ({rate:.0f} lines/s)"


def replay(path: Path, show_errors: bool = False) -> list[DecodeResult]:
    """Decode a capture file, printing failures when asked.

    Raises:
        OSError: If the capture cannot be read

    """
    with path.open(encoding="utf-8", errors="replace") as capture:
        results = list(decode_lines(capture, correlation_id=path.stem))

    if show_errors:
        for result in results:
            if result.error is not None:
                print(f"line {result.line_number}: {result.error.reason}: {result.error}")
    return results


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Decode an FSD capture file and report decode failures",
    )
    parser.add_argument(
        "capture",
        type=Path,
        help="Capture file with one FSD line per line",
    )
    parser.add_argument(
        "--show-errors",
        action="store_true",
        help="Print every line that failed to decode",
    )
    parser.add_argument(
        "--show-kinds",
        action="store_true",
        help="Print the number of decoded lines per message kind",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when any line fails to decode",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        nargs="?",
        const=FSD_METRICS_PORT,
        default=None,
        help=f"Expose Prometheus metrics, on port {FSD_METRICS_PORT} unless given",
    )

    args = parser.parse_args(argv)
    logger.set_level(getattr(logging, args.log_level))

    if args.metrics_port is not None:
        try:
            start_metrics_server(args.metrics_port)
        except OSError as e:
            logger.error("Failed to start metrics server: %s", e)
            return 1
        logger.info("Metrics server started on port %d", args.metrics_port)

    start = time.perf_counter()
    try:
        results = replay(args.capture, show_errors=args.show_errors)
    except OSError as e:
        logger.error("Cannot read capture %s: %s", args.capture, e)
        return 1
    elapsed = time.perf_counter() - start

    if args.show_kinds:
        kinds = Counter(type(result.message).__name__ for result in results if result.message is not None)
        for kind, count in kinds.most_common():
            print(f"{kind}: {count}")
    print(summarize(results, elapsed))

    if args.strict and any(not result.ok for result in results):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
