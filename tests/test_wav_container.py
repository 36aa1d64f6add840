import io
import struct

import pytest

from timesync.audio.wav_container import WavFormatError, read_wav_info

from conftest import build_wav_bytes


def test_reads_format_fields_and_info_text() -> None:
    raw = build_wav_bytes(
        [[1, 2, 3], [4, 5, 6]],
        sample_rate=48000,
        comment="Time: 2020-01-01 00:00:00\nScale-1: 8\n",
        artist="sensor-7",
        name="forest",
        date="2020-01-01",
    )
    info = read_wav_info(io.BytesIO(raw))

    assert info.chans == 3
    assert info.freq == 48000
    assert info.bytes_per_channel == 2
    assert info.num_samples == 2
    assert raw[info.offset - 8 : info.offset - 4] == b"data"
    assert info.info_comment == "Time: 2020-01-01 00:00:00\nScale-1: 8\n"
    assert info.info_artist == "sensor-7"
    assert info.info_name == "forest"
    assert info.info_date == "2020-01-01"


def test_missing_info_gives_empty_text() -> None:
    info = read_wav_info(io.BytesIO(build_wav_bytes([[0]])))
    assert info.info_comment == ""
    assert info.info_artist == ""


def test_oversized_data_chunk_is_clamped_to_file() -> None:
    raw = bytearray(build_wav_bytes([[1, 1], [2, 2], [3, 3]]))
    data_pos = raw.index(b"data")
    raw[data_pos + 4 : data_pos + 8] = struct.pack("<I", 0xFFFFFFFF)
    info = read_wav_info(io.BytesIO(bytes(raw)))
    assert info.num_samples == 3


def test_eight_bit_data_reports_one_byte_per_channel() -> None:
    info = read_wav_info(io.BytesIO(build_wav_bytes([[1, 2]], bits=8)))
    assert info.bytes_per_channel == 1


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"RIFX\x00\x00\x00\x00WAVE",
        b"RIFF\x04\x00\x00\x00WAVE",
    ],
)
def test_unreadable_containers_raise(raw: bytes) -> None:
    with pytest.raises(WavFormatError):
        read_wav_info(io.BytesIO(raw))


def test_non_pcm_format_is_rejected() -> None:
    with pytest.raises(WavFormatError):
        read_wav_info(io.BytesIO(build_wav_bytes([[0]], format_tag=3)))
