"""Runtime settings for opening sample sources."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

BufferStrategy = Literal["memory", "mmap"]

CHANNELS_MAX = 16
MAX_HEADER_LINES = 32


def normalize_buffer_strategy(value: str | None) -> BufferStrategy:
    if value is None:
        return "memory"
    normalized = value.strip().lower()
    if normalized in {"", "memory", "read", "in-memory", "in_memory"}:
        return "memory"
    if normalized in {"mmap", "map", "mapped"}:
        return "mmap"
    raise ValueError(f"Unsupported buffer strategy '{value}'")


@dataclass(slots=True)
class SampleSourceSettings:
    buffer_strategy: BufferStrategy = "memory"
    channels_max: int = CHANNELS_MAX
    max_header_lines: int = MAX_HEADER_LINES

    @staticmethod
    def from_env() -> SampleSourceSettings:
        strategy = normalize_buffer_strategy(os.getenv("TIMESYNC_BUFFER_STRATEGY"))
        lines_raw = os.getenv("TIMESYNC_MAX_HEADER_LINES", str(MAX_HEADER_LINES)).strip()
        try:
            max_lines = int(lines_raw)
        except ValueError:
            max_lines = MAX_HEADER_LINES
        return SampleSourceSettings(
            buffer_strategy=strategy,
            max_header_lines=max(max_lines, 1),
        )
