"""Unit tests for todo item coercion."""

import pytest

from logprops.types.todos import (
    TodoItem,
    coerce_todo,
    coerce_todos,
    count_by_priority,
    count_by_status,
    normalize_todo_priority,
    normalize_todo_status,
)


@pytest.mark.parametrize(
    "value, expected",
    [("done", "completed"), ("In Progress", "in_progress"), ("active", "in_progress"), ("weird", "pending"), (3, "pending")],
)
def test_normalize_todo_status(value: object, expected: str) -> None:
    assert normalize_todo_status(value) == expected


@pytest.mark.parametrize("value, expected", [("HIGH", "high"), ("normal", "medium"), (None, "medium")])
def test_normalize_todo_priority(value: object, expected: str) -> None:
    assert normalize_todo_priority(value) == expected


def test_coerce_todo_fills_defaults() -> None:
    todo = coerce_todo({"content": "x", "activeForm": "Doing x", "tags": ["a", 1]}, 2, "ts")

    assert todo == TodoItem(id="todo-3", content="x", created_at="ts", active_form="Doing x", tags=["a"])


def test_coerce_todo_numeric_id() -> None:
    assert coerce_todo({"id": 12, "content": "x"}, 0).id == "12"


def test_coerce_todos_drops_non_mappings() -> None:
    todos = coerce_todos([{"content": "a"}, "b", None, {"content": "c"}])

    assert [todo.id for todo in todos] == ["todo-1", "todo-4"]
    assert coerce_todos("not a list") == []


def test_counts() -> None:
    todos = [
        TodoItem(id="1", content="a", status="completed", priority="high"),
        TodoItem(id="2", content="b"),
    ]

    assert count_by_status(todos) == {"pending": 1, "in_progress": 0, "completed": 1}
    assert count_by_priority(todos) == {"high": 1, "medium": 1, "low": 0}


def test_todo_serializes_camel_case() -> None:
    todo = TodoItem(id="1", content="a", created_at="ts", active_form="Doing a")

    assert todo.to_dict() == {
        "id": "1",
        "content": "a",
        "status": "pending",
        "priority": "medium",
        "createdAt": "ts",
        "activeForm": "Doing a",
    }
