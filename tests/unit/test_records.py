"""Unit tests for log records and content block normalization."""

import pytest

from logprops.core.records import (
    LogRecord,
    TextBlock,
    ToolInvocationBlock,
    ToolResultBlock,
    normalize_content,
)


def test_normalize_content_none_is_empty() -> None:
    assert normalize_content(None) == []


def test_normalize_content_string_becomes_single_text_block() -> None:
    assert normalize_content("hello") == [TextBlock(text="hello")]


def test_normalize_content_single_mapping_is_wrapped() -> None:
    blocks = normalize_content({"type": "tool-invocation", "id": "t1", "name": "Bash", "input": {"command": "ls"}})

    assert blocks == [ToolInvocationBlock(id="t1", name="Bash", input={"command": "ls"})]


def test_normalize_content_preserves_order_and_drops_unknown_entries() -> None:
    blocks = normalize_content(
        [
            {"type": "text", "text": "first"},
            {"type": "image", "source": {}},
            42,
            {"type": "tool_use", "id": "t1", "name": "Read", "input": {}},
            "trailing",
        ]
    )

    assert [block.kind for block in blocks] == ["text", "tool-invocation", "text"]
    assert blocks[0] == TextBlock(text="first")
    assert blocks[2] == TextBlock(text="trailing")


def test_normalize_content_accepts_block_instances() -> None:
    block = ToolResultBlock(tool_use_id="t1", output="ok")

    assert normalize_content(block) == [block]
    assert normalize_content([block]) == [block]


@pytest.mark.parametrize("value", [3, 1.5, object()])
def test_normalize_content_unrecognized_shape_is_empty(value: object) -> None:
    assert normalize_content(value) == []


def test_thinking_block_is_text() -> None:
    blocks = normalize_content([{"type": "thinking", "thinking": "pondering"}])

    assert blocks == [TextBlock(text="pondering")]


def test_invocation_input_json_string_is_decoded() -> None:
    blocks = normalize_content([{"type": "tool_use", "id": "t1", "name": "Bash", "input": '{"command": "pwd"}'}])

    assert blocks[0].input == {"command": "pwd"}


@pytest.mark.parametrize("raw", ["not json", "[1, 2]"])
def test_invocation_input_non_object_string_is_kept_raw(raw: str) -> None:
    blocks = normalize_content([{"type": "tool_use", "id": "t1", "name": "Bash", "input": raw}])

    assert blocks[0].input == {"raw_arguments": raw}


def test_result_block_flattens_text_content_list() -> None:
    blocks = normalize_content(
        [
            {
                "type": "tool_result",
                "tool_use_id": "t1",
                "content": [{"type": "text", "text": "line one"}, {"type": "text", "text": "line two"}],
            }
        ]
    )

    assert blocks[0].output == "line one\nline two"


def test_result_block_keeps_non_text_lists() -> None:
    output = [{"name": "a"}, {"name": "b"}]
    blocks = normalize_content([{"type": "tool-result", "tool_use_id": "t1", "output": output}])

    assert blocks[0].output == output


@pytest.mark.parametrize(
    "raw_flag, expected",
    [
        (True, True),
        (False, False),
        ("true", True),
        ("error", True),
        ("no", False),
        (1, True),
        (0, False),
        (None, False),
    ],
)
def test_result_block_error_flag_coercion(raw_flag: object, expected: bool) -> None:
    blocks = normalize_content([{"type": "tool_result", "tool_use_id": "t1", "is_error": raw_flag}])

    assert blocks[0].is_error is expected
    assert blocks[0].raw_is_error == raw_flag


def test_from_dict_neutral_layout() -> None:
    record = LogRecord.from_dict(
        {
            "id": "r1",
            "timestamp": "2024-01-01T00:00:00Z",
            "role": "assistant",
            "parentId": "r0",
            "content": "hi",
            "rawResult": {"stdout": "x"},
        }
    )

    assert record.id == "r1"
    assert record.role == "assistant"
    assert record.parent_id == "r0"
    assert record.raw_result == {"stdout": "x"}
    assert record.blocks == [TextBlock(text="hi")]


def test_from_dict_claude_transcript_layout() -> None:
    record = LogRecord.from_dict(
        {
            "uuid": "u-2",
            "parentUuid": "u-1",
            "type": "user",
            "timestamp": "2024-01-01T00:00:02Z",
            "message": {
                "role": "user",
                "content": [{"type": "tool_result", "tool_use_id": "toolu_9", "content": "done"}],
            },
            "toolUseResult": {"stdout": "done", "stderr": ""},
        }
    )

    assert record.id == "u-2"
    assert record.parent_id == "u-1"
    assert record.role == "user"
    assert record.raw_result == {"stdout": "done", "stderr": ""}
    assert record.blocks[0].kind == "tool-result"
    assert record.blocks[0].tool_use_id == "toolu_9"
    assert record.blocks[0].output == "done"


def test_from_dict_missing_fields_default_empty() -> None:
    record = LogRecord.from_dict({})

    assert record.id == ""
    assert record.role == ""
    assert record.parent_id is None
    assert record.blocks == []
