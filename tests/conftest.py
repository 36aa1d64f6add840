import logging
import struct
from collections.abc import Iterator
from pathlib import Path
from typing import Callable

import pytest
import structlog

WavFactory = Callable[..., Path]


def _chunk(chunk_id: bytes, body: bytes) -> bytes:
    padded = body + (b"\x00" if len(body) % 2 else b"")
    return chunk_id + struct.pack("<I", len(body)) + padded


def build_wav_bytes(
    frames: list[list[int]],
    *,
    channels: int | None = None,
    sample_rate: int = 100,
    bits: int = 16,
    comment: str | None = None,
    artist: str | None = None,
    name: str | None = None,
    date: str | None = None,
    format_tag: int = 1,
) -> bytes:
    channel_count = channels if channels is not None else (len(frames[0]) if frames else 1)
    width = (bits + 7) // 8
    block_align = channel_count * width
    fmt = struct.pack(
        "<HHIIHH",
        format_tag,
        channel_count,
        sample_rate,
        sample_rate * block_align,
        block_align,
        bits,
    )

    info = b""
    for key, value in ((b"IART", artist), (b"INAM", name), (b"ICMT", comment), (b"ICRD", date)):
        if value is not None:
            info += _chunk(key, value.encode("utf-8") + b"\x00")

    data = bytearray()
    for frame in frames:
        for sample in frame:
            data += int(sample).to_bytes(width, "little", signed=True)

    body = b"WAVE" + _chunk(b"fmt ", fmt)
    if info:
        body += _chunk(b"LIST", b"INFO" + info)
    body += _chunk(b"data", bytes(data))
    return b"RIFF" + struct.pack("<I", len(body)) + body


@pytest.fixture()
def make_wav(tmp_path: Path) -> WavFactory:
    written: list[Path] = []

    def _make(frames: list[list[int]], **kwargs: object) -> Path:
        path = tmp_path / f"recording-{len(written) + 1}.wav"
        path.write_bytes(build_wav_bytes(frames, **kwargs))
        written.append(path)
        return path

    return _make


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
