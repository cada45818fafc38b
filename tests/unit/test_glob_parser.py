"""Unit tests for the path glob parser."""

import pytest

from logprops.parsers.glob import GlobToolParser


@pytest.fixture
def parser() -> GlobToolParser:
    return GlobToolParser()


def test_text_listing(parser, make_call, make_result) -> None:
    call = make_call("Glob", {"pattern": "**/*.py", "path": "/repo"})

    props = parser.parse(call, make_result("/repo/a.py\n/repo/b.py\n"))

    assert props.status.normalized == "completed"
    assert props.pattern == "**/*.py"
    assert props.search_path == "/repo"
    assert props.matches == ["/repo/a.py", "/repo/b.py"]
    assert props.ui.total_matches == 2
    assert props.ui.truncated is False


def test_no_files_found(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("Glob", {"pattern": "*.zig"}), make_result("No files found"))

    assert props.matches == []
    assert props.ui.total_matches == 0


def test_truncation_marker(parser, make_call, make_result) -> None:
    text = "a.py\nb.py\n(Results are truncated. Consider using a more specific path or pattern.)"

    props = parser.parse(make_call("Glob", {"pattern": "*.py"}), make_result(text))

    assert props.matches == ["a.py", "b.py"]
    assert props.ui.truncated is True


def test_list_output(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("path-glob", {"pattern": "*"}), make_result(["x", " ", "y", 3]))

    assert props.matches == ["x", "y"]


def test_structured_output_prefers_filenames(parser, make_call, make_result) -> None:
    result = make_result({"filenames": ["one.ts"], "truncated": True, "numFiles": 1})

    props = parser.parse(make_call("Glob", {"pattern": "*.ts"}), result)

    assert props.matches == ["one.ts"]
    assert props.ui.truncated is True


def test_side_channel(parser, make_call, make_result) -> None:
    result = make_result("one.ts", raw_result={"filenames": ["one.ts", "two.ts"], "truncated": False})

    props = parser.parse(make_call("Glob", {"pattern": "*.ts"}), result)

    assert props.matches == ["one.ts", "two.ts"]


def test_error(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("Glob", {"pattern": "["}), make_result("invalid pattern", is_error=True))

    assert props.status.normalized == "failed"
    assert props.error_message == "invalid pattern"
    assert props.matches == []
