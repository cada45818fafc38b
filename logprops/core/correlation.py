"""Invocation/result correlation.

Finds the tool invocation block in a request record, the matching result
block in the (optional) result record, and the base fields every props
record shares.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from logprops.constants import ASSISTANT_ROLE
from logprops.core.records import LogRecord, ToolInvocationBlock, ToolResultBlock
from logprops.errors import MissingInvocationError

NamePredicate = Callable[[str], bool]


def extract_invocation(
    record: LogRecord,
    expected_tool_name: Optional[str] = None,
    *,
    predicate: Optional[NamePredicate] = None,
    label: Optional[str] = None,
) -> ToolInvocationBlock:
    """Return the first qualifying invocation block.

    Raises:
        MissingInvocationError: No invocation block matches.
    """
    for block in record.blocks:
        if block.kind != "tool-invocation":
            continue
        if expected_tool_name is not None and block.name != expected_tool_name:
            continue
        if predicate is not None and not predicate(block.name):
            continue
        return block
    raise MissingInvocationError(expected_tool_name or label or "<any>", record.id)


def extract_result(record: Optional[LogRecord], invocation_id: str) -> Optional[ToolResultBlock]:
    """Return the result block answering `invocation_id`, or None (pending)."""
    if record is None:
        return None
    for block in record.blocks:
        if block.kind == "tool-result" and block.tool_use_id == invocation_id:
            return block
    return None


def side_channel(record: Optional[LogRecord]) -> object:
    """Out-of-band structured result attached to a result record."""
    if record is None:
        return None
    return record.raw_result


def _parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def duration_ms(started: str, finished: str) -> Optional[int]:
    """Milliseconds between two ISO-8601 timestamps, None when either is unusable."""
    start = _parse_timestamp(started)
    end = _parse_timestamp(finished)
    if start is None or end is None:
        return None
    try:
        delta = end - start
    except TypeError:
        # naive vs aware
        return None
    millis = delta // timedelta(milliseconds=1)
    return millis if millis >= 0 else None


@dataclass(frozen=True)
class Correlation:
    """An invocation, its result (if any), and the shared base fields."""

    invocation: ToolInvocationBlock
    result: Optional[ToolResultBlock]
    side_channel: object
    id: str
    correlation_id: str
    timestamp: str
    parent_id: Optional[str] = None
    duration: Optional[int] = None

    @property
    def pending(self) -> bool:
        return self.result is None

    @property
    def is_error(self) -> bool:
        return self.result is not None and self.result.is_error

    @property
    def output(self) -> object:
        return None if self.result is None else self.result.output

    @property
    def raw_error_signal(self) -> object:
        """The producer's own error flag, None while pending."""
        return None if self.result is None else self.result.raw_is_error

    def base_fields(self) -> dict[str, object]:  # guard: loose-dict - Props constructor kwargs
        return {
            "id": self.id,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp,
            "parent_id": self.parent_id,
            "duration": self.duration,
        }


def correlate(
    call: LogRecord,
    result_record: Optional[LogRecord] = None,
    *,
    expected_tool_name: Optional[str] = None,
    predicate: Optional[NamePredicate] = None,
    label: Optional[str] = None,
    preserve_timestamps: bool = True,
) -> Correlation:
    """Pair an invocation with its result.

    Raises:
        MissingInvocationError: `call` holds no qualifying invocation block.
    """
    invocation = extract_invocation(call, expected_tool_name, predicate=predicate, label=label)
    result = extract_result(result_record, invocation.id)
    duration = None
    if preserve_timestamps and result is not None and result_record is not None:
        duration = duration_ms(call.timestamp, result_record.timestamp)
    return Correlation(
        invocation=invocation,
        result=result,
        side_channel=side_channel(result_record) if result is not None else None,
        id=invocation.id,
        correlation_id=call.id,
        timestamp=call.timestamp,
        parent_id=call.parent_id,
        duration=duration,
    )


def pair_records(records: Iterable[LogRecord]) -> list[tuple[LogRecord, Optional[LogRecord]]]:
    """Pair every invocation in a transcript with the record holding its result.

    Records carrying several invocations are split so each pair holds
    exactly one invocation block. Unanswered invocations pair with None.
    Pairs come back in invocation order.
    """
    ordered = list(records)
    result_owner: dict[str, LogRecord] = {}
    for record in ordered:
        for block in record.blocks:
            if block.kind == "tool-result" and block.tool_use_id not in result_owner:
                result_owner[block.tool_use_id] = record

    pairs: list[tuple[LogRecord, Optional[LogRecord]]] = []
    for record in ordered:
        if record.role != ASSISTANT_ROLE:
            continue
        invocations = [block for block in record.blocks if block.kind == "tool-invocation"]
        for invocation in invocations:
            call = record if len(invocations) == 1 else dataclasses.replace(record, content=[invocation])
            pairs.append((call, result_owner.get(invocation.id)))
    return pairs
