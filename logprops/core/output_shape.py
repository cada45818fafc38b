"""Display-shape heuristics for arbitrary tool output.

Shared by every parser that needs to tell the renderer how to present an
output value it knows nothing about.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Literal

from logprops.constants import (
    COMPLEX_OBJECT_KEYS,
    COMPLEX_TABLE_ROWS,
    LARGE_LIST_ITEMS,
    LARGE_OBJECT_KEYS,
    LARGE_TEXT_CHARS,
)

DisplayMode = Literal["empty", "text", "json", "table", "list"]


@dataclass(frozen=True)
class OutputShape:
    display_mode: DisplayMode
    is_structured: bool = False
    has_nested_data: bool = False
    key_count: int = 0
    is_complex: bool = False
    is_large: bool = False

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized shape
        return asdict(self)


def _is_container(value: object) -> bool:
    return isinstance(value, (dict, list))


def analyze_output(output: object) -> OutputShape:
    """Classify an already-decoded output value."""
    if output is None:
        return OutputShape(display_mode="empty")

    if isinstance(output, str):
        return OutputShape(display_mode="text", is_large=len(output) > LARGE_TEXT_CHARS)

    if isinstance(output, list):
        is_table = any(_is_container(item) for item in output)
        return OutputShape(
            display_mode="table" if is_table else "list",
            is_structured=True,
            has_nested_data=is_table,
            key_count=len(output),
            is_complex=is_table and len(output) > COMPLEX_TABLE_ROWS,
            is_large=len(output) > LARGE_LIST_ITEMS,
        )

    if isinstance(output, dict):
        nested = any(_is_container(value) for value in output.values())
        key_count = len(output)
        return OutputShape(
            display_mode="json",
            is_structured=True,
            has_nested_data=nested,
            key_count=key_count,
            is_complex=nested or key_count > COMPLEX_OBJECT_KEYS,
            is_large=key_count > LARGE_OBJECT_KEYS,
        )

    # bool, numbers and anything else scalar
    return OutputShape(display_mode="text")


def decode_output(value: object) -> object:
    """Decode a JSON object/array string; anything else comes back unchanged."""
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not stripped or stripped[0] not in "[{":
        return value
    try:
        decoded = json.loads(stripped)
    except json.JSONDecodeError:
        return value
    if isinstance(decoded, (dict, list)):
        return decoded
    return value


def classify_output(output: object) -> tuple[object, OutputShape]:
    """Decode-then-reclassify: returns the (possibly decoded) value and its shape."""
    decoded = decode_output(output)
    return decoded, analyze_output(decoded)
