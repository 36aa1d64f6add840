"""Command-line inspection of timestamped WAV recordings."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

import structlog

from timesync.audio.sample_source import SampleSource
from timesync.config import SampleSourceSettings
from timesync.errors import EXIT_OK, SampleSourceError
from timesync.logging_setup import configure_logging

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timesync-info",
        description="Show the layout, start time and channel scales of a recording.",
    )
    parser.add_argument("path", help="WAV file to open")
    parser.add_argument("--mmap", action="store_true", help="map the file instead of reading it")
    parser.add_argument("--frames", type=int, default=0, help="print the first N frames (scaled)")
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="diagnostic log level (stderr)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    settings = SampleSourceSettings.from_env()
    if args.mmap:
        settings.buffer_strategy = "mmap"

    try:
        source = SampleSource.open(args.path, settings)
    except SampleSourceError as exc:
        logger.error("open failed", path=args.path, error=str(exc))
        return exc.exit_code

    with source:
        info = source.info()
        if args.json:
            print(info.model_dump_json(indent=2))
        else:
            print(f"{info.path}: {info.channels} ch @ {info.sample_rate} Hz, {info.num_samples} frames")
            print(f"  start: {info.start_time_text}")
            print("  scale: " + ", ".join(f"{value:g}" for value in info.scale))
        count = min(max(args.frames, 0), source.num_samples)
        if count:
            _print_frames(source, count)
    return EXIT_OK


def _print_frames(source: SampleSource, count: int) -> None:
    view = source.read(0, count)
    columns = [view.scaled(chan, count) for chan in range(source.num_channels)]
    for row in range(count):
        print("\t".join(f"{column[row]:.6g}" for column in columns))


if __name__ == "__main__":
    raise SystemExit(main())
