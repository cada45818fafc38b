"""Unit tests for the file read parser."""

import pytest

from logprops.config.schema import ParserSettings
from logprops.parsers.read import ReadToolParser


@pytest.fixture
def parser() -> ReadToolParser:
    return ReadToolParser()


def test_plain_text_read(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("Read", {"file_path": "/a/b.rs"}), make_result("fn main() {}\n// end\n"))

    assert props.status.normalized == "completed"
    assert props.file_type == "rust"
    assert props.content == "fn main() {}\n// end\n"
    assert props.total_lines == 2
    assert props.file_size == len("fn main() {}\n// end\n")
    assert props.truncated is False


def test_file_size_counts_utf8_bytes(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("Read", {"file_path": "x.txt"}), make_result("héllo"))

    assert props.file_size == 6


def test_side_channel_file_payload(parser, make_call, make_result) -> None:
    result = make_result(
        "     1\tline one\n     2\tline two",
        raw_result={"type": "text", "file": {"filePath": "/f.md", "content": "one\ntwo", "totalLines": 40}},
    )

    props = parser.parse(make_call("Read", {"file_path": "/f.md", "offset": 1, "limit": 2}), result)

    assert props.content == "one\ntwo"
    assert props.total_lines == 40
    assert props.offset == 1
    assert props.limit == 2
    assert props.truncated is True


def test_limit_below_line_count_is_not_truncated_without_total(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("Read", {"file_path": "f", "limit": 5}), make_result("a\nb\nc"))

    assert props.truncated is False


def test_max_content_length_cuts_content(make_call, make_result) -> None:
    parser = ReadToolParser(ParserSettings(max_content_length=4))

    props = parser.parse(make_call("Read", {"file_path": "f.txt"}), make_result("abcdefgh"))

    assert props.content == "abcd"
    assert props.file_size == 8
    assert props.truncated is True


def test_error_read(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("Read", {"file_path": "/missing"}), make_result("File does not exist.", is_error=True))

    assert props.status.normalized == "failed"
    assert props.error_message == "File does not exist."
    assert props.content == ""


def test_pending_read(parser, make_call) -> None:
    props = parser.parse(make_call("file-read", {"file_path": "/x.json"}))

    assert props.status.normalized == "pending"
    assert props.file_type == "json"


JSON_BODY = '{"content": "hello", "version": 2}'


@pytest.mark.parametrize(
    "raw_result",
    [None, {"type": "text", "file": {"filePath": "/x/data.json", "content": JSON_BODY, "numLines": 1}}],
)
def test_json_file_body_is_not_unwrapped(parser, make_call, make_result, raw_result) -> None:
    props = parser.parse(make_call("Read", {"file_path": "/x/data.json"}), make_result(JSON_BODY, raw_result=raw_result))

    assert props.content == JSON_BODY
    assert props.file_type == "json"
    assert props.total_lines == 1
    assert props.file_size == len(JSON_BODY)
