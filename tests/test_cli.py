from __future__ import annotations

import json
from pathlib import Path

import pytest

from ui import cli


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.txt"
    path.write_bytes("foo bar\nbaz\nnaïve\n".encode("utf-8"))
    return path


def _stdout(capsys) -> str:
    return capsys.readouterr().out


def test_default_reports_lines_words_bytes(sample_file: Path, capsys) -> None:
    cli.main([str(sample_file)])
    assert _stdout(capsys) == f"3 4 19 {sample_file}\n"


@pytest.mark.parametrize(
    ("flag", "expected"),
    [("-c", "19"), ("-l", "3"), ("-w", "4"), ("-m", "18")],
)
def test_single_flag_reports_one_count(sample_file: Path, capsys, flag: str, expected: str) -> None:
    cli.main([flag, str(sample_file)])
    assert _stdout(capsys) == f"{expected} {sample_file}\n"


def test_flag_after_path(sample_file: Path, capsys) -> None:
    cli.main([str(sample_file), "-w"])
    assert _stdout(capsys) == f"4 {sample_file}\n"


def test_printable_char_mode(sample_file: Path, capsys) -> None:
    cli.main(["-m", "--char-mode", "printable", str(sample_file)])
    assert _stdout(capsys) == f"14 {sample_file}\n"


def test_single_pass_output_matches_default(sample_file: Path, capsys) -> None:
    cli.main(["--single-pass", str(sample_file)])
    assert _stdout(capsys) == f"3 4 19 {sample_file}\n"


def test_missing_path_is_silent(capsys) -> None:
    cli.main([])
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_first_mode_flag_wins(sample_file: Path, capsys) -> None:
    cli.main(["-c", "-l", str(sample_file)])
    assert _stdout(capsys) == f"19 {sample_file}\n"

    cli.main(["-w", str(sample_file), "-m", "-c"])
    assert _stdout(capsys) == f"4 {sample_file}\n"


def test_missing_file_exits_with_message(tmp_path: Path, capsys) -> None:
    missing = tmp_path / "missing.txt"
    with pytest.raises(SystemExit) as exc:
        cli.main(["-l", str(missing)])
    message = str(exc.value.code)
    assert message.startswith("streamcount: ")
    assert str(missing) in message
    assert _stdout(capsys) == ""


def test_bad_profile_exits_with_message(sample_file: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["--profile", "turbo", str(sample_file)])
    assert "turbo" in str(exc.value.code)


def test_progress_log_and_verbose(sample_file: Path, tmp_path: Path, capsys) -> None:
    log_path = tmp_path / "progress.jsonl"
    cli.main(["-v", "--progress-log", str(log_path), "--profile", "low_memory", str(sample_file)])
    captured = capsys.readouterr()
    assert captured.out == f"3 4 19 {sample_file}\n"
    assert captured.err.count("[count]") == 3
    modes = [json.loads(line)["mode"] for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert modes == ["lines", "words", "bytes"]


def test_config_file_selects_char_mode(sample_file: Path, tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "version": 1,
                "global": {"char_mode": "printable"},
                "profiles": {"default": {"description": "custom", "chunk_size": 2}},
            }
        ),
        encoding="utf-8",
    )
    cli.main(["-m", "--config", str(config_path), str(sample_file)])
    assert _stdout(capsys) == f"14 {sample_file}\n"
