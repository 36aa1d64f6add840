"""Read-only byte buffers holding a whole recording file."""

from __future__ import annotations

import logging
import mmap
from typing import BinaryIO, Protocol

import structlog

from timesync.config import BufferStrategy
from timesync.errors import ResourceError, SampleIOError

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)


class SampleBuffer(Protocol):
    strategy: BufferStrategy

    def __len__(self) -> int: ...

    def view(self) -> memoryview: ...

    def close(self) -> None: ...


class InMemoryBuffer:
    strategy: BufferStrategy = "memory"

    def __init__(self, data: bytes) -> None:
        self._data: bytes | None = data

    @classmethod
    def load(cls, fp: BinaryIO, length: int) -> InMemoryBuffer:
        logger.info("allocating and reading buffer", bytes=length)
        fp.seek(0)
        try:
            data = fp.read(length)
        except MemoryError as exc:
            raise ResourceError(f"Problem allocating {length} bytes.") from exc
        if len(data) != length:
            raise SampleIOError(f"Problem reading {length} bytes (got {len(data)}).")
        return cls(data)

    def __len__(self) -> int:
        return 0 if self._data is None else len(self._data)

    def view(self) -> memoryview:
        if self._data is None:
            raise ValueError("buffer is released")
        return memoryview(self._data)

    def close(self) -> None:
        self._data = None


class MappedBuffer:
    strategy: BufferStrategy = "mmap"

    def __init__(self, mapping: mmap.mmap) -> None:
        self._mapping: mmap.mmap | None = mapping

    @classmethod
    def load(cls, fp: BinaryIO, length: int) -> MappedBuffer:
        logger.info("mapping buffer", bytes=length)
        try:
            mapping = mmap.mmap(fp.fileno(), length, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as exc:
            raise ResourceError(f"Problem mapping {length} bytes.") from exc
        return cls(mapping)

    def __len__(self) -> int:
        return 0 if self._mapping is None else len(self._mapping)

    def view(self) -> memoryview:
        if self._mapping is None:
            raise ValueError("buffer is released")
        return memoryview(self._mapping)

    def close(self) -> None:
        mapping, self._mapping = self._mapping, None
        if mapping is None:
            return
        try:
            mapping.close()
        except BufferError:
            # Arrays handed out by views still export the mapping; it is
            # unmapped once the last of them is collected.
            logger.warning("mapping still exported, deferring unmap")


def load_buffer(fp: BinaryIO, length: int, strategy: BufferStrategy) -> SampleBuffer:
    if strategy == "mmap":
        return MappedBuffer.load(fp, length)
    return InMemoryBuffer.load(fp, length)
