"""Timestamped multi-channel WAV sample source."""

from timesync.audio import SampleSource, SampleView
from timesync.config import SampleSourceSettings
from timesync.errors import (
    DataFormatError,
    NoInputError,
    OutOfRangeError,
    ResourceError,
    SampleIOError,
    SampleSourceError,
    SourceClosedError,
)

__all__ = [
    "DataFormatError",
    "NoInputError",
    "OutOfRangeError",
    "ResourceError",
    "SampleIOError",
    "SampleSource",
    "SampleSourceError",
    "SampleSourceSettings",
    "SampleView",
    "SourceClosedError",
]
