"""Unit tests for the generic external tool parser."""

import pytest

from logprops.parsers.generic import GenericToolParser, split_tool_name


@pytest.fixture
def parser() -> GenericToolParser:
    return GenericToolParser()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("generic-integration__serverX__methodY", ("serverX", "methodY")),
        ("mcp__context7__resolve__library__id", ("context7", "resolve_library_id")),
        ("mcp__solo", ("solo", "mcp__solo")),
        ("mcp__", ("unknown", "mcp__")),
        ("mcp_puppeteer_navigate_page", ("puppeteer", "navigate_page")),
        ("mcp_x", ("unknown", "mcp_x")),
    ],
)
def test_split_tool_name(name: str, expected: tuple[str, str]) -> None:
    assert split_tool_name(name) == expected


@pytest.mark.parametrize(
    "name, accepted",
    [
        ("generic-integration__a__b", True),
        ("mcp__a__b", True),
        ("MCP__a__b", False),
        ("Bash", False),
        ("", False),
    ],
)
def test_accepts_reserved_prefixes_case_sensitively(parser, name: str, accepted: bool) -> None:
    assert parser.accepts_name(name) is accepted


def test_structured_output(parser, make_call, make_result) -> None:
    call = make_call("generic-integration__serverX__methodY", {"query": "q"})

    props = parser.parse(call, make_result('{"items": [1, 2], "total": 2}'))

    assert props.status.normalized == "completed"
    assert props.tool_name == "generic-integration__serverX__methodY"
    assert props.server_name == "serverX"
    assert props.method_name == "methodY"
    assert props.parameters == {"query": "q"}
    assert props.output == {"items": [1, 2], "total": 2}
    assert props.ui.display_mode == "json"
    assert props.ui.has_nested_data is True
    assert props.ui.show_raw_json is True
    assert props.ui.collapsible is False


def test_text_output(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("mcp__fs__read"), make_result("plain words"))

    assert props.output == "plain words"
    assert props.ui.display_mode == "text"
    assert props.ui.show_raw_json is False


def test_side_channel_when_output_missing(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("mcp__fs__stat"), make_result(None, raw_result={"size": 10}))

    assert props.output == {"size": 10}


def test_pending(parser, make_call) -> None:
    props = parser.parse(make_call("mcp__fs__stat"))

    assert props.status.normalized == "pending"
    assert props.output is None
    assert props.ui.display_mode == "empty"


def test_error_keeps_structured_payload(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("mcp__fs__stat"), make_result({"error": "ENOENT", "code": 2}, is_error=True))

    assert props.status.normalized == "failed"
    assert props.error_message == "ENOENT"
    assert props.output == {"error": "ENOENT", "code": 2}


def test_error_text_is_message_only(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("mcp__fs__stat"), make_result("server unreachable", is_error=True))

    assert props.error_message == "server unreachable"
    assert props.output is None


def test_error_without_detail_uses_default(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("mcp__fs__stat"), make_result(None, is_error=True))

    assert props.error_message == "mcp__fs__stat failed"


def test_interrupted_output(parser, make_call, make_result) -> None:
    props = parser.parse(make_call("mcp__fs__walk"), make_result({"interrupted": True}))

    assert props.status.normalized == "interrupted"


def test_large_table_is_collapsible(parser, make_call, make_result) -> None:
    rows = [{"n": i} for i in range(12)]

    props = parser.parse(make_call("mcp__db__query"), make_result(rows))

    assert props.ui.display_mode == "table"
    assert props.ui.is_complex is True
    assert props.ui.collapsible is True
