"""Todo list read parser."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_list,
    as_mapping,
    extract_error_message,
    first_decoded,
    pick,
)
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import TodoReadToolProps, TodoReadUi
from logprops.types.todos import (
    TodoItem,
    TodoPriority,
    TodoStatus,
    coerce_todos,
    count_by_priority,
    count_by_status,
    normalize_todo_priority,
)

_CHECKBOX = re.compile(r"^[-*]\s*\[(?P<mark>[ xX~-])\]\s*(?P<text>.+)$")
_NUMBERED = re.compile(r"^\d+[.)]\s*(?P<text>.+)$")
_PRIORITY_SUFFIX = re.compile(r"^(?P<text>.+?)\s*\(priority:\s*(?P<priority>high|medium|low)\)\s*$", re.IGNORECASE)
_PRIORITY_PREFIX = re.compile(r"^\[(?P<priority>high|medium|low)\]\s*(?P<text>.+)$", re.IGNORECASE)

_CHECKBOX_STATUS: dict[str, TodoStatus] = {
    " ": "pending",
    "x": "completed",
    "X": "completed",
    "~": "in_progress",
    "-": "in_progress",
}


@dataclass(frozen=True)
class TodoSnapshot:
    todos: tuple[TodoItem, ...] = ()
    status_counts: Optional[dict[str, int]] = None
    priority_counts: Optional[dict[str, int]] = None
    interrupted: bool = False


def split_priority(text: str) -> tuple[str, Optional[TodoPriority]]:
    """Strip a `(priority: x)` suffix or `[X]` prefix marker."""
    match = _PRIORITY_SUFFIX.match(text) or _PRIORITY_PREFIX.match(text)
    if match is None:
        return text.strip(), None
    return match.group("text").strip(), normalize_todo_priority(match.group("priority"))


def parse_todo_text(text: str, created_at: str = "") -> list[TodoItem]:
    """Parse markdown checkbox or numbered todo lines."""
    todos: list[TodoItem] = []
    for line in text.strip().split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        checkbox = _CHECKBOX.match(stripped)
        if checkbox is not None:
            status = _CHECKBOX_STATUS[checkbox.group("mark")]
            body = checkbox.group("text")
        else:
            numbered = _NUMBERED.match(stripped)
            if numbered is None:
                continue
            status = "pending"
            body = numbered.group("text")
        content, priority = split_priority(body)
        todos.append(
            TodoItem(
                id=f"todo-{len(todos) + 1}",
                content=content,
                status=status,
                priority=priority or "medium",
                created_at=created_at,
            )
        )
    return todos


def _counts(raw: object) -> Optional[dict[str, int]]:
    data = as_mapping(raw)
    if data is None:
        return None
    return {key: value for key, value in data.items() if isinstance(value, int) and not isinstance(value, bool)}


def _from_mapping(data: Optional[Mapping[str, object]], created_at: str) -> Optional[TodoSnapshot]:
    if data is None:
        return None
    if data.get("interrupted") is True:
        return TodoSnapshot(interrupted=True)
    items = as_list(pick(data, "todos", "items", "newTodos"))
    if items is None:
        return None
    return TodoSnapshot(
        todos=tuple(coerce_todos(items, created_at)),
        status_counts=_counts(pick(data, "statusCounts", "status_counts")),
        priority_counts=_counts(pick(data, "priorityCounts", "priority_counts")),
    )


def _from_list(raw: object, created_at: str) -> Optional[TodoSnapshot]:
    items = as_list(raw)
    if items is None:
        return None
    return TodoSnapshot(todos=tuple(coerce_todos(items, created_at)))


class TodoReadToolParser(ToolParser[TodoReadToolProps]):
    """Todo list snapshots with status and priority breakdowns."""

    tool_name = TOOL_NAMES["todo_read"][0]
    aliases = TOOL_NAMES["todo_read"][1:]
    tool_type = "other"
    supported_features = (*BASE_FEATURES, "status-counts", "priority-counts", "markdown-todos")

    def _decoders(self, created_at: str) -> tuple[Decoder[TodoSnapshot], ...]:
        def structured(ctx: DecodeContext) -> Optional[TodoSnapshot]:
            return _from_mapping(ctx.structured, created_at) or _from_list(ctx.output, created_at)

        def side_channel(ctx: DecodeContext) -> Optional[TodoSnapshot]:
            return _from_list(ctx.side_channel, created_at) or _from_mapping(ctx.side_mapping, created_at)

        def text(ctx: DecodeContext) -> Optional[TodoSnapshot]:
            if ctx.text is None:
                return None
            return TodoSnapshot(todos=tuple(parse_todo_text(ctx.text, created_at)))

        return (structured, side_channel, text)

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> TodoReadToolProps:
        correlation = self.correlate(call, result)
        fields = correlation.base_fields()
        if correlation.pending:
            return TodoReadToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return TodoReadToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=extract_error_message(ctx, "Failed to read todos"),
            )

        snapshot = first_decoded(self._decoders(correlation.timestamp), ctx, TodoSnapshot())
        todos = list(snapshot.todos)
        by_status = count_by_status(todos)
        return TodoReadToolProps(
            **fields,
            status=self.status_for(correlation, interrupted=snapshot.interrupted),
            todos=todos,
            status_counts=snapshot.status_counts if snapshot.status_counts is not None else by_status,
            priority_counts=snapshot.priority_counts
            if snapshot.priority_counts is not None
            else count_by_priority(todos),
            ui=TodoReadUi(
                total_todos=len(todos),
                completed_todos=by_status["completed"],
                pending_todos=by_status["pending"],
                in_progress_todos=by_status["in_progress"],
            ),
        )
