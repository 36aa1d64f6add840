"""WAV container reading, header parsing and sample access."""

from timesync.audio.buffers import InMemoryBuffer, MappedBuffer, SampleBuffer
from timesync.audio.header import HeaderMetadata, parse_header_comment
from timesync.audio.sample_source import SampleSource, SampleView
from timesync.audio.schemas import RecordingInfo
from timesync.audio.wav_container import WavFormatError, WavInfo, read_wav_info

__all__ = [
    "HeaderMetadata",
    "InMemoryBuffer",
    "MappedBuffer",
    "RecordingInfo",
    "SampleBuffer",
    "SampleSource",
    "SampleView",
    "WavFormatError",
    "WavInfo",
    "parse_header_comment",
    "read_wav_info",
]
