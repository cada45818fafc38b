"""Todo list items and the changes between two lists."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal, Optional, cast

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

TodoStatus = Literal["pending", "in_progress", "completed"]
TodoPriority = Literal["high", "medium", "low"]
TodoChangeType = Literal["add", "update", "delete"]

_STATUS_ALIASES: dict[str, TodoStatus] = {
    "pending": "pending",
    "todo": "pending",
    "in_progress": "in_progress",
    "in-progress": "in_progress",
    "in progress": "in_progress",
    "inprogress": "in_progress",
    "active": "in_progress",
    "completed": "completed",
    "complete": "completed",
    "done": "completed",
}

_PRIORITY_ALIASES: dict[str, TodoPriority] = {
    "high": "high",
    "medium": "medium",
    "med": "medium",
    "normal": "medium",
    "low": "low",
}


class TodoModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized props
        return self.model_dump(by_alias=True, exclude_none=True)


class TodoItem(TodoModel):
    id: str
    content: str
    status: TodoStatus = "pending"
    priority: TodoPriority = "medium"
    created_at: str = ""
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None
    tags: Optional[list[str]] = None
    active_form: Optional[str] = None


class TodoChange(TodoModel):
    type: TodoChangeType
    todo_id: str
    old_value: Optional[TodoItem] = None
    new_value: Optional[TodoItem] = None


def normalize_todo_status(value: object) -> TodoStatus:
    if isinstance(value, str):
        return _STATUS_ALIASES.get(value.strip().lower(), "pending")
    return "pending"


def normalize_todo_priority(value: object) -> TodoPriority:
    if isinstance(value, str):
        return _PRIORITY_ALIASES.get(value.strip().lower(), "medium")
    return "medium"


def _opt_str(data: Mapping[str, object], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def coerce_todo(raw: object, index: int, fallback_timestamp: str = "") -> Optional[TodoItem]:
    """Build a TodoItem from a loosely-shaped dict.

    Missing ids become `todo-<n>` (1-based position). Missing creation
    timestamps fall back to `fallback_timestamp`, normally the record's own.
    Returns None for entries that are not mappings.
    """
    if not isinstance(raw, Mapping):
        return None
    data = cast(Mapping[str, object], raw)

    raw_id = data.get("id")
    if isinstance(raw_id, (int, float)) and not isinstance(raw_id, bool):
        todo_id = str(raw_id)
    else:
        todo_id = _opt_str(data, "id") or f"todo-{index + 1}"

    tags_raw = data.get("tags")
    tags = [tag for tag in tags_raw if isinstance(tag, str)] if isinstance(tags_raw, list) else None

    return TodoItem(
        id=todo_id,
        content=_opt_str(data, "content", "text", "title") or "",
        status=normalize_todo_status(data.get("status")),
        priority=normalize_todo_priority(data.get("priority")),
        created_at=_opt_str(data, "createdAt", "created_at") or fallback_timestamp,
        updated_at=_opt_str(data, "updatedAt", "updated_at"),
        completed_at=_opt_str(data, "completedAt", "completed_at"),
        tags=tags,
        active_form=_opt_str(data, "activeForm", "active_form"),
    )


def coerce_todos(raw: object, fallback_timestamp: str = "") -> list[TodoItem]:
    """Coerce a list of loosely-shaped todos, dropping entries that are not mappings."""
    if not isinstance(raw, list):
        return []
    todos: list[TodoItem] = []
    for index, item in enumerate(raw):
        todo = coerce_todo(item, index, fallback_timestamp)
        if todo is not None:
            todos.append(todo)
    return todos


def count_by_status(todos: list[TodoItem]) -> dict[str, int]:
    counts = {"pending": 0, "in_progress": 0, "completed": 0}
    for todo in todos:
        counts[todo.status] += 1
    return counts


def count_by_priority(todos: list[TodoItem]) -> dict[str, int]:
    counts = {"high": 0, "medium": 0, "low": 0}
    for todo in todos:
        counts[todo.priority] += 1
    return counts
