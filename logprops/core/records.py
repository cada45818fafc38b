"""Log records and their content blocks.

A record's `content` field arrives as a plain string, a single block, or a
sequence of blocks, in either the neutral tag vocabulary
(`text` / `tool-invocation` / `tool-result`) or the one Claude Code writes
to its JSONL transcripts (`text` / `thinking` / `tool_use` / `tool_result`).
`normalize_content` folds all of these into one ordered list of frozen
blocks discriminated by `kind`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, Optional, Union, cast

BlockKind = Literal["text", "tool-invocation", "tool-result"]

_TEXT_TAGS = frozenset({"text", "thinking"})
_INVOCATION_TAGS = frozenset({"tool-invocation", "tool_use", "tool-use"})
_RESULT_TAGS = frozenset({"tool-result", "tool_result"})


@dataclass(frozen=True)
class TextBlock:
    """Plain assistant or user text."""

    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class ToolInvocationBlock:
    """A requested tool call."""

    id: str
    name: str
    input: dict[str, object] = field(default_factory=dict)  # guard: loose-dict - External tool input
    kind: Literal["tool-invocation"] = "tool-invocation"


@dataclass(frozen=True)
class ToolResultBlock:
    """The outcome of a tool call, referencing its invocation by id."""

    tool_use_id: str
    is_error: bool = False
    # Raw error signal as written by the producer, kept for status diagnostics
    raw_is_error: object = None
    output: object = None
    kind: Literal["tool-result"] = "tool-result"


ContentBlock = Union[TextBlock, ToolInvocationBlock, ToolResultBlock]
_BLOCK_TYPES = (TextBlock, ToolInvocationBlock, ToolResultBlock)


def _parse_input(raw_input: object) -> dict[str, object]:  # guard: loose-dict - External tool input
    """Parse invocation input into a dict payload."""
    if isinstance(raw_input, dict):
        return dict(cast(dict[str, object], raw_input))  # guard: loose-dict - External tool input
    if isinstance(raw_input, str):
        try:
            parsed = json.loads(raw_input)
        except json.JSONDecodeError:
            return {"raw_arguments": raw_input}
        if isinstance(parsed, dict):
            return cast(dict[str, object], parsed)  # guard: loose-dict - External tool input
        return {"raw_arguments": raw_input}
    return {}


def _flatten_result_output(raw_output: object) -> object:
    """Collapse Claude-style `[{type: text, text: ...}]` result content into a string.

    Lists holding anything other than text blocks are returned as-is so the
    caller can still classify them.
    """
    if not isinstance(raw_output, list) or not raw_output:
        return raw_output
    texts: list[str] = []
    for item in raw_output:
        if not isinstance(item, dict) or item.get("type") != "text":
            return raw_output
        text = item.get("text")
        texts.append(text if isinstance(text, str) else "")
    return "\n".join(texts)


def _coerce_error_flag(raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "1", "yes", "error")
    if isinstance(raw, (int, float)):
        return raw != 0
    return False


def _block_from_dict(raw: Mapping[str, object]) -> Optional[ContentBlock]:
    tag = raw.get("type", raw.get("kind"))
    if not isinstance(tag, str):
        return None

    if tag in _TEXT_TAGS:
        text = raw.get("text", raw.get("thinking", ""))
        return TextBlock(text=text if isinstance(text, str) else "")

    if tag in _INVOCATION_TAGS:
        name = raw.get("name", raw.get("tool"))
        block_id = raw.get("id", "")
        return ToolInvocationBlock(
            id=block_id if isinstance(block_id, str) else str(block_id),
            name=name if isinstance(name, str) else "",
            input=_parse_input(raw.get("input", raw.get("arguments"))),
        )

    if tag in _RESULT_TAGS:
        ref = raw.get("tool_use_id", raw.get("toolUseId", raw.get("id", "")))
        raw_is_error = raw.get("is_error", raw.get("isError"))
        if "output" in raw:
            output = raw.get("output")
        elif "content" in raw:
            output = raw.get("content")
        else:
            output = raw.get("text")
        return ToolResultBlock(
            tool_use_id=ref if isinstance(ref, str) else str(ref),
            is_error=_coerce_error_flag(raw_is_error),
            raw_is_error=raw_is_error,
            output=_flatten_result_output(output),
        )

    return None


def _coerce_block(item: object) -> Optional[ContentBlock]:
    if isinstance(item, _BLOCK_TYPES):
        return item
    if isinstance(item, str):
        return TextBlock(text=item)
    if isinstance(item, Mapping):
        return _block_from_dict(cast(Mapping[str, object], item))
    return None


def normalize_content(content: object) -> list[ContentBlock]:
    """Coerce a record's content field into an ordered list of blocks.

    Never raises. Unrecognised entries are dropped.
    """
    if content is None:
        return []
    if isinstance(content, str):
        return [TextBlock(text=content)]
    if isinstance(content, (Mapping, *_BLOCK_TYPES)):
        block = _coerce_block(content)
        return [block] if block is not None else []
    if isinstance(content, Sequence) and not isinstance(content, (bytes, bytearray)):
        blocks: list[ContentBlock] = []
        for item in content:
            block = _coerce_block(item)
            if block is not None:
                blocks.append(block)
        return blocks
    return []


def _first_str(data: Mapping[str, object], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


@dataclass(frozen=True)
class LogRecord:
    """One entry in an agent's interaction history."""

    id: str
    timestamp: str = ""
    role: str = ""
    content: object = None
    parent_id: Optional[str] = None
    # Out-of-band structured result some producers attach outside `content`
    raw_result: object = None

    @property
    def blocks(self) -> list[ContentBlock]:
        """Normalized content blocks."""
        return normalize_content(self.content)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "LogRecord":
        """Build a record from either the neutral or the Claude Code JSONL layout."""
        message = data.get("message")
        message_map: Mapping[str, object] = (
            cast(Mapping[str, object], message) if isinstance(message, Mapping) else {}
        )

        role = _first_str(message_map, "role") or _first_str(data, "role", "type") or ""
        if "content" in data:
            content = data.get("content")
        else:
            content = message_map.get("content")

        if "rawResult" in data:
            raw_result = data.get("rawResult")
        elif "raw_result" in data:
            raw_result = data.get("raw_result")
        else:
            raw_result = data.get("toolUseResult")

        return cls(
            id=_first_str(data, "id", "uuid") or "",
            timestamp=_first_str(data, "timestamp") or "",
            role=role,
            content=content,
            parent_id=_first_str(data, "parentId", "parent_id", "parentUuid"),
            raw_result=raw_result,
        )
