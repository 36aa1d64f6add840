import json
from pathlib import Path
from typing import Callable

import pytest

from timesync.cli import main

HEADER_COMMENT = "Time: 2020-01-01T00:00:00Z\nScale-1: 16384\nScale-2: 8192\n"


def test_prints_summary_and_frames(make_wav: Callable[..., Path], capsys: pytest.CaptureFixture[str]) -> None:
    path = make_wav([[2, 4], [6, 8], [10, 12]], comment=HEADER_COMMENT)

    assert main([str(path), "--frames", "2"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].endswith("2 ch @ 100 Hz, 3 frames")
    assert out[1] == "  start: 2020-01-01 00:00:00.000"
    assert out[2] == "  scale: 0.5, 0.25"
    assert out[3:] == ["1\t1", "3\t2"]


def test_json_output_with_mmap(make_wav: Callable[..., Path], capsys: pytest.CaptureFixture[str]) -> None:
    path = make_wav([[1]], comment="Scale-1: 32768")

    assert main([str(path), "--json", "--mmap"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["channels"] == 1
    assert payload["scale"] == [1.0]
    assert payload["start_time"] == 0.0
    assert payload["buffer_strategy"] == "mmap"


def test_errors_map_to_exit_codes(tmp_path: Path, make_wav: Callable[..., Path]) -> None:
    assert main([str(tmp_path / "missing.wav")]) == 66
    assert main([str(make_wav([[1]], bits=8))]) == 65


def test_stage_lines_logged_to_stderr_by_default(
    make_wav: Callable[..., Path], capsys: pytest.CaptureFixture[str]
) -> None:
    assert main([str(make_wav([[1]], comment=HEADER_COMMENT))]) == 0
    captured = capsys.readouterr()
    assert "loading header" in captured.err
    assert "allocating and reading buffer" in captured.err
    assert "loading header" not in captured.out


def test_unknown_log_level_is_a_usage_error(make_wav: Callable[..., Path]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(make_wav([[1]])), "--log-level", "chatty"])
    assert excinfo.value.code == 2
