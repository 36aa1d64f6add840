import pytest

from timesync.config import MAX_HEADER_LINES, SampleSourceSettings, normalize_buffer_strategy


def test_defaults_from_empty_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TIMESYNC_BUFFER_STRATEGY", raising=False)
    monkeypatch.delenv("TIMESYNC_MAX_HEADER_LINES", raising=False)
    settings = SampleSourceSettings.from_env()
    assert settings.buffer_strategy == "memory"
    assert settings.max_header_lines == MAX_HEADER_LINES
    assert settings.channels_max == 16


def test_env_selects_mmap(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIMESYNC_BUFFER_STRATEGY", " MMAP ")
    monkeypatch.setenv("TIMESYNC_MAX_HEADER_LINES", "not-a-number")
    settings = SampleSourceSettings.from_env()
    assert settings.buffer_strategy == "mmap"
    assert settings.max_header_lines == MAX_HEADER_LINES


def test_unknown_strategy_is_rejected() -> None:
    with pytest.raises(ValueError):
        normalize_buffer_strategy("zip")
