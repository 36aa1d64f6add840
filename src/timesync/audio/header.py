"""Recording header parsing from the WAV comment field.

The comment text carries one ``Key: value`` pair per line. Two keys are
recognised:

``Time: <timestamp>``
    Recording start time, parsed with :func:`timesync.timestamp.parse_time`.
``Scale-N: <decimal>``
    Full-scale value of channel ``N`` (1-9); the stored factor is the value
    divided by 32768 so that ``raw * scale`` gives physical units.

Missing or non-positive values are reported as warnings and leave the
defaults (time 0, scale 1.0) in place.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from itertools import islice

import structlog

from timesync.config import CHANNELS_MAX, MAX_HEADER_LINES
from timesync.timestamp import format_time, parse_time

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)

INT16_FULL_SCALE = 32768.0
REQUIRED_SCALE_CHANNELS = 3

_TIME_PREFIX = "Time:"
_SCALE_RE = re.compile(r"^Scale-([1-9]):")
_LEADING_FLOAT_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(slots=True)
class HeaderMetadata:
    start_time: float = 0.0
    scale: list[float] = field(default_factory=lambda: [1.0] * CHANNELS_MAX)
    warnings: list[str] = field(default_factory=list)


def iter_header_lines(text: str, max_lines: int = MAX_HEADER_LINES) -> Iterator[str]:
    """Yield the non-empty lines of ``text``, at most ``max_lines`` of them."""
    lines = (line for line in _split_lines(text) if line)
    return islice(lines, max_lines)


def parse_leading_float(text: str) -> float:
    match = _LEADING_FLOAT_RE.match(text)
    if match is None:
        return 0.0
    return float(match.group(0))


def parse_header_comment(
    text: str,
    scale: list[float] | None = None,
    *,
    channels_max: int = CHANNELS_MAX,
    max_lines: int = MAX_HEADER_LINES,
) -> HeaderMetadata:
    metadata = HeaderMetadata(
        scale=list(scale) if scale is not None else [1.0] * channels_max,
    )
    parsed_time = False
    parsed_scale: set[int] = set()

    for line in iter_header_lines(text, max_lines):
        if line.startswith(_TIME_PREFIX):
            value = parse_time(line[len(_TIME_PREFIX) :])
            logger.info("header time", value=value, time=format_time(value))
            if value > 0:
                metadata.start_time = value
                parsed_time = True
            continue

        match = _SCALE_RE.match(line)
        if match is None:
            continue
        chan = int(match.group(1)) - 1
        value = parse_leading_float(line[match.end() :])
        factor = value / INT16_FULL_SCALE
        logger.info("header scale", header=f"Scale-{chan + 1}", value=value, channel=chan, scale=factor)
        if factor > 0 and chan < min(channels_max, len(metadata.scale)):
            metadata.scale[chan] = factor
            parsed_scale.add(chan)

    if not parsed_time:
        metadata.warnings.append("Didn't successfully parse a 'Time' header (using zero).")
    for chan in range(REQUIRED_SCALE_CHANNELS):
        if chan not in parsed_scale:
            metadata.warnings.append(
                f"Didn't successfully parse a 'Scale-{chan + 1}' header (using defaults)."
            )
    for message in metadata.warnings:
        logger.warning(message)
    return metadata


def _split_lines(text: str) -> Iterator[str]:
    start = 0
    while True:
        end = text.find("\n", start)
        if end < 0:
            yield text[start:]
            return
        yield text[start:end]
        start = end + 1
