"""Todo list write parser.

The operation (create / update / replace / clear) is classified from the
shape of the todo identifiers alone. Changes are taken from the first
source that has them:

1. an old/new snapshot pair (Claude Code's `oldTodos` / `newTodos`), diffed;
2. structured counts, expanded positionally over the written list;
3. counts scraped from the result message (legacy, can be disabled);
4. otherwise every written todo counts as an addition.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Callable, Optional, cast

from instrukt_ai_logging import get_logger

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_list,
    extract_error_message,
    first_decoded,
    has_any,
    is_interrupted_output,
    pick_int,
    pick_str,
)
from logprops.core.records import LogRecord
from logprops.core.status import ToolStatus
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import TodoChangesSource, TodoOperation, TodoWriteToolProps, TodoWriteUi
from logprops.types.todos import TodoChange, TodoItem, coerce_todos

logger = get_logger(__name__)

_ADDED_KEYS = ("added", "addedCount", "added_count")
_UPDATED_KEYS = ("updated", "updatedCount", "updated_count")
_REMOVED_KEYS = ("removed", "removedCount", "removed_count")
_WRITTEN_KEYS = ("totalProcessed", "writtenCount", "written", "written_count")

# Legacy: counts recovered from human-readable result text
_LEGACY_COUNT_PATTERNS: dict[str, re.Pattern[str]] = {
    "added": re.compile(r"(\d+)\s+(?:todos?\s+|items?\s+)?(?:were\s+)?added", re.IGNORECASE),
    "updated": re.compile(r"(\d+)\s+(?:todos?\s+|items?\s+)?(?:were\s+)?(?:updated|modified)", re.IGNORECASE),
    "removed": re.compile(r"(\d+)\s+(?:todos?\s+|items?\s+)?(?:were\s+)?(?:removed|deleted)", re.IGNORECASE),
}


@dataclass(frozen=True)
class ChangeSet:
    changes: tuple[TodoChange, ...]
    source: TodoChangesSource
    written: Optional[int] = None


# ---------------------------------------------------------------------------
# Operation classification
# ---------------------------------------------------------------------------


def _raw_id(item: Mapping[str, object]) -> Optional[str]:
    value = item.get("id")
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def classify_operation(raw_todos: object, fresh_prefixes: Sequence[str]) -> TodoOperation:
    """Classify a write from its todo identifiers.

    clear: empty list. create: every id absent or fresh. update: some item
    has a stable id and an update timestamp. replace: anything else.
    """
    items = [cast(Mapping[str, object], item) for item in as_list(raw_todos) or [] if isinstance(item, Mapping)]
    if not items:
        return "clear"

    prefixes = tuple(fresh_prefixes)

    def is_fresh(todo_id: Optional[str]) -> bool:
        return todo_id is None or todo_id.startswith(prefixes)

    if all(is_fresh(_raw_id(item)) for item in items):
        return "create"
    if any(not is_fresh(_raw_id(item)) and item.get("updatedAt", item.get("updated_at")) for item in items):
        return "update"
    return "replace"


# ---------------------------------------------------------------------------
# Change sources
# ---------------------------------------------------------------------------


def _same_item(old: TodoItem, new: TodoItem) -> bool:
    return (old.content, old.status, old.priority, old.active_form) == (
        new.content,
        new.status,
        new.priority,
        new.active_form,
    )


def diff_todos(
    old_raw: Sequence[object], new_raw: Sequence[object], created_at: str
) -> tuple[TodoChange, ...]:
    """Changes between two snapshots, keyed by id, or by content when ids are missing."""
    keyed_by_id = all(
        isinstance(item, Mapping) and _raw_id(cast(Mapping[str, object], item)) is not None
        for item in (*old_raw, *new_raw)
    )
    key: Callable[[TodoItem], str] = (lambda t: t.id) if keyed_by_id else (lambda t: t.content)

    old_items = {key(todo): todo for todo in coerce_todos(list(old_raw), created_at)}
    new_items = coerce_todos(list(new_raw), created_at)
    new_keys = {key(todo) for todo in new_items}

    changes: list[TodoChange] = []
    for todo in new_items:
        previous = old_items.get(key(todo))
        if previous is None:
            changes.append(TodoChange(type="add", todo_id=todo.id, new_value=todo))
        elif not _same_item(previous, todo):
            changes.append(TodoChange(type="update", todo_id=todo.id, old_value=previous, new_value=todo))
    for old_key, todo in old_items.items():
        if old_key not in new_keys:
            changes.append(TodoChange(type="delete", todo_id=todo.id, old_value=todo))
    return tuple(changes)


def expand_counts(todos: Sequence[TodoItem], added: int, updated: int, removed: int) -> tuple[TodoChange, ...]:
    """Synthesize changes from bare counts, assigning todos positionally."""
    added, updated, removed = (max(count, 0) for count in (added, updated, removed))
    changes: list[TodoChange] = []
    for todo in todos[:added]:
        changes.append(TodoChange(type="add", todo_id=todo.id, new_value=todo))
    for todo in todos[added : added + updated]:
        changes.append(TodoChange(type="update", todo_id=todo.id, new_value=todo))
    # Removed items are no longer in the written list, so only placeholders exist
    for index in range(removed):
        changes.append(TodoChange(type="delete", todo_id=f"removed-{index}"))
    return tuple(changes)


def legacy_message_counts(text: str) -> Optional[tuple[int, int, int]]:
    """Scrape added/updated/removed counts from a result message. Legacy fallback only."""
    found = {name: pattern.search(text) for name, pattern in _LEGACY_COUNT_PATTERNS.items()}
    if not any(found.values()):
        return None

    def count(name: str) -> int:
        match = found[name]
        return int(match.group(1)) if match is not None else 0

    return count("added"), count("updated"), count("removed")


def _structured_message(ctx: DecodeContext) -> Optional[str]:
    return pick_str(ctx.json_structured, "message") or pick_str(ctx.side_mapping, "message") or ctx.plain_text


def _interrupted(ctx: DecodeContext) -> bool:
    if is_interrupted_output(ctx):
        return True
    return ctx.plain_text is not None and "interrupted" in ctx.plain_text.lower()


class TodoWriteToolParser(ToolParser[TodoWriteToolProps]):
    """Todo list writes with operation classification and change tracking."""

    tool_name = TOOL_NAMES["todo_write"][0]
    aliases = TOOL_NAMES["todo_write"][1:]
    tool_type = "other"
    supported_features = (
        *BASE_FEATURES,
        "structured-output",
        "batch-operations",
        "operation-detection",
        "change-tracking",
        "statistics",
        "interrupted-support",
    )

    def _decoders(self, todos: Sequence[TodoItem], created_at: str) -> tuple[Decoder[ChangeSet], ...]:
        def snapshot_diff(ctx: DecodeContext) -> Optional[ChangeSet]:
            for data in (ctx.side_mapping, ctx.json_structured):
                if data is None:
                    continue
                old_raw = as_list(data.get("oldTodos"))
                new_raw = as_list(data.get("newTodos"))
                if old_raw is None or new_raw is None:
                    continue
                return ChangeSet(
                    changes=diff_todos(old_raw, new_raw, created_at),
                    source="diff",
                    written=len(new_raw),
                )
            return None

        def structured_counts(ctx: DecodeContext) -> Optional[ChangeSet]:
            for data in (ctx.json_structured, ctx.side_mapping):
                if not has_any(data, *_ADDED_KEYS, *_UPDATED_KEYS, *_REMOVED_KEYS, *_WRITTEN_KEYS):
                    continue
                added = pick_int(data, *_ADDED_KEYS) or 0
                updated = pick_int(data, *_UPDATED_KEYS) or 0
                removed = pick_int(data, *_REMOVED_KEYS) or 0
                written = pick_int(data, *_WRITTEN_KEYS)
                if added == updated == removed == 0:
                    # Only a written total: nothing to expand
                    return None
                return ChangeSet(
                    changes=expand_counts(todos, added, updated, removed),
                    source="counts",
                    written=written if written is not None else added + updated,
                )
            return None

        def legacy_message(ctx: DecodeContext) -> Optional[ChangeSet]:
            if not self.settings.legacy_message_counts or not ctx.plain_text:
                return None
            counts = legacy_message_counts(ctx.plain_text)
            if counts is None:
                return None
            added, updated, removed = counts
            logger.debug("Todo change counts recovered from result message (legacy)")
            return ChangeSet(changes=expand_counts(todos, added, updated, removed), source="legacy-message")

        return (snapshot_diff, structured_counts, legacy_message)

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> TodoWriteToolProps:
        correlation = self.correlate(call, result)
        raw_todos = correlation.invocation.input.get("todos")
        todos = coerce_todos(raw_todos, correlation.timestamp)
        fields = {
            **correlation.base_fields(),
            "todos": todos,
            "operation": classify_operation(raw_todos, self.settings.fresh_todo_prefixes),
        }
        all_added = ChangeSet(
            changes=tuple(TodoChange(type="add", todo_id=todo.id, new_value=todo) for todo in todos),
            source="input",
        )

        if correlation.pending:
            return self._build(fields, self.status_for(correlation), all_added, 0)

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return TodoWriteToolProps(
                **fields,
                status=self.status_for(correlation),
                changes=[],
                error_message=extract_error_message(ctx, "Failed to write todos"),
                ui=TodoWriteUi(total_todos=len(todos)),
            )

        change_set = first_decoded(self._decoders(todos, correlation.timestamp), ctx, all_added)
        written = change_set.written if change_set.written is not None else len(todos)
        return self._build(
            fields,
            self.status_for(correlation, interrupted=_interrupted(ctx)),
            change_set,
            written,
            message=_structured_message(ctx),
        )

    @staticmethod
    def _build(
        fields: dict[str, object],  # guard: loose-dict - Props constructor kwargs
        status: ToolStatus,
        change_set: ChangeSet,
        written: int,
        message: Optional[str] = None,
    ) -> TodoWriteToolProps:
        changes = list(change_set.changes)
        todos = cast(list[TodoItem], fields["todos"])
        return TodoWriteToolProps(
            **fields,
            status=status,
            changes=changes,
            changes_source=change_set.source,
            message=message,
            ui=TodoWriteUi(
                total_todos=len(todos),
                added_count=sum(1 for change in changes if change.type == "add"),
                modified_count=sum(1 for change in changes if change.type == "update"),
                deleted_count=sum(1 for change in changes if change.type == "delete"),
                written_count=written,
            ),
        )
