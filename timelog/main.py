"""
timelog - command line entry point.

Appends TimeRecords to a log stream and prints them back:

Usage:
    timelog append --id 1 --owner Taro --message "Hello world"
    timelog read --stream test
    timelog demo

Configuration is entirely via environment variables.
See config.py for all available settings.

Invariants:
    - Store failures exit non-zero with the error on stderr
    - An entry that fails to decode is reported, never fatal
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import json_log_formatter

from .config import AppConfig
from .record import TimeRecord
from .stream import (
    MAX_ID,
    MIN_ID,
    LogStoreError,
    StreamEntryAdapter,
    create_log_store,
)

logger = logging.getLogger(__name__)

UNKNOWN_DATA = "unknown data..."


def setup_logging(config: AppConfig) -> None:
    """Configure logging based on configuration.

    Args:
        config: Application configuration
    """
    level = getattr(logging, config.observability.log_level.upper(), logging.INFO)

    if config.observability.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Reduce noise from libraries
    logging.getLogger("redis").setLevel(logging.WARNING)


class TimelogCLI:
    """Commands of the timelog tool.

    Each command returns the lines to print so it can be tested
    without capturing stdout.

    Example:
        >>> cli = TimelogCLI(StreamEntryAdapter(InMemoryLogStore()))
        >>> cli.append("test", TimeRecord(1, "Taro", "Hello world"))
        '1700000000000-0'
    """

    def __init__(self, adapter: StreamEntryAdapter) -> None:
        self.adapter = adapter

    def append(self, stream: str, record: TimeRecord) -> str:
        """Append a record, returning its entry id."""
        return self.adapter.append_record(stream, record)

    def read(self, stream: str, lower: str = MIN_ID, upper: str = MAX_ID) -> List[str]:
        """Read a stream range and format one line per entry."""
        result = self.adapter.read_range(stream, lower, upper)

        lines = []
        for item in result:
            if item.ok:
                lines.append(f"{item.entry.entry_id} {item.record}")
            else:
                lines.append(UNKNOWN_DATA)
        if result.dropped:
            lines.append(f"({result.dropped} malformed entries skipped)")
        return lines

    def demo(self, stream: str) -> List[str]:
        """Append a sample record and read the whole stream back."""
        record = TimeRecord(id=1, owner="Taro", message="Hello world")
        lines = [str(record)]
        self.append(stream, record)
        lines.extend(self.read(stream))
        return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Typed records on a log stream")
    parser.add_argument("--stream", "-s", help="Stream name (default: TIMELOG_STREAM)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    append_parser = subparsers.add_parser("append", help="Append a record")
    append_parser.add_argument("--id", type=int, required=True, help="Record id (>= 0)")
    append_parser.add_argument("--owner", required=True, help="Record owner")
    append_parser.add_argument("--message", default="", help="Message text")

    read_parser = subparsers.add_parser("read", help="Read records in an id range")
    read_parser.add_argument("--lower", default=MIN_ID, help="Lower id bound (default: -)")
    read_parser.add_argument("--upper", default=MAX_ID, help="Upper id bound (default: +)")

    subparsers.add_parser("demo", help="Append a sample record and read it back")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = AppConfig.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(config)
    config.log_config()

    stream = args.stream or config.stream.name
    try:
        store = create_log_store(config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    cli = TimelogCLI(StreamEntryAdapter(store))

    try:
        if args.command == "append":
            try:
                record = TimeRecord(id=args.id, owner=args.owner, message=args.message)
            except ValueError as e:
                print(f"Invalid record: {e}", file=sys.stderr)
                return 2
            print(cli.append(stream, record))

        elif args.command == "read":
            for line in cli.read(stream, args.lower, args.upper):
                print(line)

        elif args.command == "demo":
            for line in cli.demo(stream):
                print(line)

    except LogStoreError as e:
        logger.error(f"Log store error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
