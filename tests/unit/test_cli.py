"""Unit tests for the transcript CLI."""

import io
import json
import sys
from pathlib import Path

import pytest

from logprops import __main__ as cli

TRANSCRIPT = [
    {
        "uuid": "a1",
        "type": "assistant",
        "timestamp": "2024-01-01T00:00:00Z",
        "message": {
            "role": "assistant",
            "content": [{"type": "tool_use", "id": "toolu_1", "name": "Bash", "input": {"command": "echo hi"}}],
        },
    },
    {
        "uuid": "u1",
        "parentUuid": "a1",
        "type": "user",
        "timestamp": "2024-01-01T00:00:00.200Z",
        "message": {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "hi", "is_error": False}],
        },
        "toolUseResult": {"stdout": "hi", "stderr": "", "interrupted": False},
    },
]


def _write_transcript(path: Path, extra_lines: tuple[str, ...] = ()) -> Path:
    lines = [json.dumps(entry) for entry in TRANSCRIPT]
    path.write_text("\n".join([*extra_lines, *lines]) + "\n", encoding="utf-8")
    return path


def test_iter_records_skips_blank_and_malformed_lines() -> None:
    records = list(cli.iter_records(["", "{not json", "[1, 2]", json.dumps(TRANSCRIPT[0])]))

    assert [record.id for record in records] == ["a1"]


def test_run_writes_one_json_line_per_invocation(tmp_path: Path) -> None:
    transcript = _write_transcript(tmp_path / "session.jsonl", ("garbage",))
    out = io.StringIO()

    count = cli.run(transcript, out=out)

    assert count == 1
    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["toolType"] == "Bash"
    assert payload["correlationId"] == "toolu_1"
    assert payload["props"]["output"] == "hi"
    assert payload["props"]["duration"] == 200
    assert payload["props"]["status"]["normalized"] == "completed"


def test_main_missing_transcript_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(cli, "setup_logging", lambda _level: None)
    monkeypatch.setattr(sys, "argv", ["logprops", str(tmp_path / "nope.jsonl")])

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert "Transcript not found" in capsys.readouterr().err


def test_main_prints_props(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    transcript = _write_transcript(tmp_path / "session.jsonl")
    config = tmp_path / "logprops.yml"
    config.write_text("preserve_timestamps: false\n")
    monkeypatch.setattr(cli, "setup_logging", lambda _level: None)
    monkeypatch.setattr(sys, "argv", ["logprops", str(transcript), "--config", str(config)])

    cli.main()

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["props"]["command"] == "echo hi"
    assert "duration" not in payload["props"]
