"""RIFF/WAVE container reader returning format fields and INFO text."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_EXTENSIBLE = 0xFFFE

_INFO_FIELDS = {
    "IART": "artist",
    "INAM": "name",
    "ICMT": "comment",
    "ICRD": "date",
}


class WavFormatError(ValueError):
    """Raised when a file is not a readable RIFF/WAVE container."""


@dataclass(slots=True)
class WavInfo:
    format_tag: int = 0
    chans: int = 0
    freq: int = 0
    bytes_per_channel: int = 0
    offset: int = 0
    num_samples: int = 0
    info: dict[str, str] = field(default_factory=dict)

    @property
    def info_artist(self) -> str:
        return self.info.get("artist", "")

    @property
    def info_name(self) -> str:
        return self.info.get("name", "")

    @property
    def info_comment(self) -> str:
        return self.info.get("comment", "")

    @property
    def info_date(self) -> str:
        return self.info.get("date", "")


def read_wav_info(fp: BinaryIO) -> WavInfo:
    """Walk the chunks of an open WAV file and collect its layout.

    The handle is left at an unspecified position.
    """
    fp.seek(0, os.SEEK_END)
    file_size = fp.tell()
    fp.seek(0)

    header = fp.read(12)
    if len(header) < 12 or header[0:4] != b"RIFF" or header[8:12] != b"WAVE":
        raise WavFormatError("not a RIFF/WAVE file")

    result = WavInfo()
    have_fmt = False
    data_size: int | None = None

    pos = 12
    while pos + 8 <= file_size:
        fp.seek(pos)
        chunk_header = fp.read(8)
        if len(chunk_header) < 8:
            break
        chunk_id = chunk_header[0:4]
        chunk_size = struct.unpack("<I", chunk_header[4:8])[0]
        body_start = pos + 8

        if chunk_id == b"fmt ":
            _parse_fmt_chunk(fp.read(min(chunk_size, 40)), result)
            have_fmt = True
        elif chunk_id == b"LIST":
            body = fp.read(chunk_size)
            if body[:4] == b"INFO":
                result.info.update(_parse_list_info_chunk(body))
        elif chunk_id == b"data" and data_size is None:
            result.offset = body_start
            # Streaming writers may leave the size unset or too large.
            data_size = min(chunk_size, file_size - body_start)

        pos = body_start + chunk_size
        if chunk_size % 2 == 1:
            pos += 1

    if not have_fmt:
        raise WavFormatError("missing 'fmt ' chunk")
    if data_size is None:
        raise WavFormatError("missing 'data' chunk")
    if result.format_tag not in {WAVE_FORMAT_PCM, WAVE_FORMAT_EXTENSIBLE}:
        raise WavFormatError(f"unsupported format tag 0x{result.format_tag:04x}")

    frame_size = result.chans * result.bytes_per_channel
    result.num_samples = data_size // frame_size if frame_size > 0 else 0
    return result


def _parse_fmt_chunk(data: bytes, result: WavInfo) -> None:
    if len(data) < 16:
        raise WavFormatError("truncated 'fmt ' chunk")
    format_tag, chans, freq, _byte_rate, _block_align, bits = struct.unpack("<HHIIHH", data[:16])
    if format_tag == WAVE_FORMAT_EXTENSIBLE and len(data) >= 26:
        # Sub-format GUID starts with the effective format tag.
        format_tag = struct.unpack("<H", data[24:26])[0]
    result.format_tag = format_tag
    result.chans = chans
    result.freq = freq
    result.bytes_per_channel = (bits + 7) // 8


def _parse_list_info_chunk(data: bytes) -> dict[str, str]:
    info: dict[str, str] = {}
    pos = 4
    while pos + 8 <= len(data):
        subchunk_id = data[pos : pos + 4].decode("ascii", errors="ignore")
        subchunk_size = struct.unpack("<I", data[pos + 4 : pos + 8])[0]
        content = data[pos + 8 : pos + 8 + subchunk_size]
        key = _INFO_FIELDS.get(subchunk_id)
        if key is not None:
            info[key] = content.split(b"\x00", 1)[0].decode("utf-8", errors="replace")
        pos += 8 + subchunk_size
        if subchunk_size % 2 == 1:
            pos += 1
    return info
