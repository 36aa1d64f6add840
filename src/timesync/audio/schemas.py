"""Recording summary schema."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class RecordingInfo(BaseModel):
    path: str
    channels: int = Field(ge=1)
    sample_rate: int = Field(ge=1)
    num_samples: int = Field(ge=0)
    duration_sec: float
    start_time: float
    start_time_text: str
    scale: list[float]
    info_artist: str = ""
    info_name: str = ""
    info_comment: str = ""
    info_date: str = ""
    data_start_offset: int
    buffer_strategy: Literal["memory", "mmap"]
    buffer_length: int
