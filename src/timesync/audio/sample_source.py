"""Whole-file sample source for timestamped 16-bit PCM recordings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

import numpy as np
import structlog

from timesync.audio.buffers import SampleBuffer, load_buffer
from timesync.audio.header import parse_header_comment
from timesync.audio.schemas import RecordingInfo
from timesync.audio.wav_container import WavFormatError, read_wav_info
from timesync.config import CHANNELS_MAX, SampleSourceSettings
from timesync.errors import (
    DataFormatError,
    NoInputError,
    OutOfRangeError,
    SourceClosedError,
)
from timesync.timestamp import format_time

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)

BYTES_PER_CHANNEL = 2
INFO_TEXT_MAX = 1024

_SAMPLE_DTYPE = np.dtype("<i2")


def _open_binary(path: Path) -> BinaryIO:
    return path.open("rb")


class SampleSource:
    """One open recording: format fields, header metadata and the file buffer.

    Use :meth:`open` to construct, :meth:`read` for frame views and
    :meth:`close` (or a ``with`` block) to release the buffer.
    """

    def __init__(self, path: Path, settings: SampleSourceSettings) -> None:
        self.path = path
        self.settings = settings
        self.scale: list[float] = [1.0] * settings.channels_max
        self.info_artist = ""
        self.info_name = ""
        self.info_comment = ""
        self.info_date = ""
        self.data_start_offset = 0
        self.num_channels = 0
        self.num_samples = 0
        self.sample_rate = 0
        self.start_time = 0.0
        self._buffer: SampleBuffer | None = None

    @classmethod
    def open(cls, path: str | Path, settings: SampleSourceSettings | None = None) -> SampleSource:
        file_path = Path(path)
        source = cls(file_path, settings or SampleSourceSettings())
        logger.info("loading header", path=str(file_path))
        try:
            fp = _open_binary(file_path)
        except OSError as exc:
            raise NoInputError(f"Cannot open WAV file: {file_path}") from exc
        with fp:
            source._load(fp)
        return source

    def _load(self, fp: BinaryIO) -> None:
        channels_max = min(self.settings.channels_max, CHANNELS_MAX)
        try:
            wav = read_wav_info(fp)
        except WavFormatError as exc:
            raise DataFormatError(f"Problem reading WAV file format: {exc}") from exc

        if wav.bytes_per_channel != BYTES_PER_CHANNEL:
            raise DataFormatError(
                f"WAV file format not supported ({wav.bytes_per_channel} bytes/channel, expected 2 = 16-bit)."
            )
        if wav.chans < 1 or wav.chans > channels_max:
            raise DataFormatError(
                f"WAV file format not supported ({wav.chans} channels, "
                f"expected at least 1 and no more than {channels_max})."
            )
        if wav.freq < 1:
            raise DataFormatError(f"WAV file format not supported ({wav.freq} frequency).")

        self.info_artist = wav.info_artist[:INFO_TEXT_MAX]
        self.info_name = wav.info_name[:INFO_TEXT_MAX]
        self.info_comment = wav.info_comment[:INFO_TEXT_MAX]
        self.info_date = wav.info_date[:INFO_TEXT_MAX]

        header = parse_header_comment(
            self.info_comment,
            self.scale,
            channels_max=channels_max,
            max_lines=self.settings.max_header_lines,
        )
        self.scale = header.scale
        self.start_time = header.start_time
        self.data_start_offset = wav.offset
        self.num_channels = wav.chans
        self.num_samples = wav.num_samples
        self.sample_rate = wav.freq

        length = fp.seek(0, os.SEEK_END)
        self._buffer = load_buffer(fp, length, self.settings.buffer_strategy)
        logger.info(
            "sample source open",
            channels=self.num_channels,
            samples=self.num_samples,
            rate=self.sample_rate,
            start=format_time(self.start_time),
            buffer_bytes=length,
        )

    @property
    def closed(self) -> bool:
        return self._buffer is None

    @property
    def buffer_length(self) -> int:
        return 0 if self._buffer is None else len(self._buffer)

    @property
    def span(self) -> int:
        return BYTES_PER_CHANNEL * self.num_channels

    @property
    def duration_sec(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.num_samples / self.sample_rate

    def read(self, index: int, min_count: int = 1) -> SampleView:
        """Return a view of the frames starting at ``index``.

        ``index + min_count`` must not exceed the number of frames.
        """
        self._require_open()
        if index < 0 or min_count < 0 or index + min_count > self.num_samples:
            raise OutOfRangeError(
                f"frames [{index}, {index + min_count}) outside recording of {self.num_samples} frames"
            )
        offset = self.data_start_offset + BYTES_PER_CHANNEL * index * self.num_channels
        return SampleView(self, index=index, min_count=min_count, offset=offset, span=self.span)

    def close(self) -> None:
        buffer, self._buffer = self._buffer, None
        if buffer is not None:
            buffer.close()
            logger.info("sample source closed", path=str(self.path))

    def info(self) -> RecordingInfo:
        return RecordingInfo(
            path=str(self.path),
            channels=self.num_channels,
            sample_rate=self.sample_rate,
            num_samples=self.num_samples,
            duration_sec=self.duration_sec,
            start_time=self.start_time,
            start_time_text=format_time(self.start_time),
            scale=self.scale[: self.num_channels],
            info_artist=self.info_artist,
            info_name=self.info_name,
            info_comment=self.info_comment,
            info_date=self.info_date,
            data_start_offset=self.data_start_offset,
            buffer_strategy=self.settings.buffer_strategy,
            buffer_length=self.buffer_length,
        )

    def _require_open(self) -> SampleBuffer:
        if self._buffer is None:
            raise SourceClosedError(f"sample source '{self.path}' is closed")
        return self._buffer

    def __enter__(self) -> SampleSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class SampleView:
    """Frames of a :class:`SampleSource` from ``index`` to the end of the data.

    The arrays returned here alias the source buffer; every access checks the
    source is still open.
    """

    __slots__ = ("_source", "index", "min_count", "offset", "span")

    def __init__(self, source: SampleSource, *, index: int, min_count: int, offset: int, span: int) -> None:
        self._source = source
        self.index = index
        self.min_count = min_count
        self.offset = offset
        self.span = span

    @property
    def num_frames(self) -> int:
        return self._source.num_samples - self.index

    @property
    def frames(self) -> np.ndarray:
        buffer = self._source._require_open()
        channels = self._source.num_channels
        if self.num_frames == 0:
            empty = np.empty((0, channels), dtype=_SAMPLE_DTYPE)
            empty.flags.writeable = False
            return empty
        flat = np.frombuffer(
            buffer.view(),
            dtype=_SAMPLE_DTYPE,
            count=self.num_frames * channels,
            offset=self.offset,
        )
        return flat.reshape(self.num_frames, channels)

    def channel(self, chan: int) -> np.ndarray:
        if chan < 0 or chan >= self._source.num_channels:
            raise OutOfRangeError(f"channel {chan} outside 0..{self._source.num_channels - 1}")
        return self.frames[:, chan]

    def scaled(self, chan: int, count: int | None = None) -> np.ndarray:
        """Channel ``chan`` in physical units, limited to the first ``count`` frames."""
        column = self.channel(chan)
        if count is not None:
            column = column[: max(count, 0)]
        return column.astype(np.float64) * self._source.scale[chan]
