"""Timestamp parsing and formatting for recording headers."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta, timezone

_TIMESTAMP_RE = re.compile(
    r"""
    ^(?P<year>\d{4})[-/](?P<month>\d{1,2})[-/](?P<day>\d{1,2})
    (?:[T ,]+
        (?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?
    )?
    \s*(?P<tz>Z|[+-]\d{2}:?\d{2})?$
    """,
    re.VERBOSE | re.IGNORECASE,
)


def parse_time(text: str) -> float:
    """Parse a header timestamp into epoch seconds.

    Accepts ``YYYY-MM-DD[T| ]hh:mm[:ss[.fff]]`` with an optional ``Z`` or
    ``+hh:mm`` suffix. Values without an offset are taken as UTC. Returns
    ``0.0`` when the text is not a timestamp.
    """
    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        return 0.0

    fraction = match.group("fraction") or ""
    microsecond = int((fraction + "000000")[:6]) if fraction else 0
    try:
        moment = datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour") or 0),
            int(match.group("minute") or 0),
            int(match.group("second") or 0),
            microsecond,
            tzinfo=_parse_offset(match.group("tz")),
        )
    except ValueError:
        return 0.0
    try:
        moment.astimezone(UTC)
    except (ValueError, OverflowError):
        # Offset pushes the instant outside the datetime range.
        return 0.0
    return moment.timestamp()


def format_time(value: float) -> str:
    if value <= 0:
        return "-"
    try:
        moment = datetime.fromtimestamp(value, UTC)
    except (ValueError, OverflowError, OSError):
        return f"{value:.3f}"
    return moment.strftime("%Y-%m-%d %H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


def _parse_offset(raw: str | None) -> timezone:
    if raw is None or raw.upper() == "Z":
        return UTC
    sign = -1 if raw[0] == "-" else 1
    digits = raw[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return timezone(sign * offset)
