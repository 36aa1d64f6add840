"""Error taxonomy for opening and reading sample sources."""

from __future__ import annotations

# sysexits.h
EXIT_OK = 0
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70
EXIT_IOERR = 74


class SampleSourceError(RuntimeError):
    """Base class for failures surfaced by a sample source."""

    exit_code: int = EXIT_SOFTWARE


class NoInputError(SampleSourceError):
    """Raised when the recording file cannot be opened."""

    exit_code = EXIT_NOINPUT


class DataFormatError(SampleSourceError):
    """Raised when the container is unreadable or its format is unsupported."""

    exit_code = EXIT_DATAERR


class ResourceError(SampleSourceError):
    """Raised when the sample buffer cannot be allocated or mapped."""

    exit_code = EXIT_SOFTWARE


class SampleIOError(SampleSourceError):
    """Raised when fewer bytes are read than the file holds."""

    exit_code = EXIT_IOERR


class OutOfRangeError(SampleSourceError, IndexError):
    """Raised when a read asks for frames past the end of the recording."""


class SourceClosedError(SampleSourceError):
    """Raised when a closed source (or a view on it) is accessed."""
