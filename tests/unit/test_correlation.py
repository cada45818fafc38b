"""Unit tests for invocation/result correlation and transcript pairing."""

import pytest

from logprops.core.correlation import (
    correlate,
    duration_ms,
    extract_invocation,
    extract_result,
    pair_records,
)
from logprops.core.records import LogRecord
from logprops.errors import MissingInvocationError, ParseError


def _assistant(record_id: str, *invocations: tuple[str, str]) -> LogRecord:
    return LogRecord(
        id=record_id,
        timestamp="2024-01-01T00:00:00Z",
        role="assistant",
        content=[{"type": "tool_use", "id": tool_id, "name": name, "input": {}} for tool_id, name in invocations],
    )


def _user(record_id: str, *tool_ids: str) -> LogRecord:
    return LogRecord(
        id=record_id,
        timestamp="2024-01-01T00:00:01Z",
        role="user",
        content=[{"type": "tool_result", "tool_use_id": tool_id, "output": "ok"} for tool_id in tool_ids],
    )


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def test_extract_invocation_returns_first_matching_block() -> None:
    record = _assistant("r1", ("t1", "Read"), ("t2", "Bash"))

    assert extract_invocation(record).id == "t1"
    assert extract_invocation(record, "Bash").id == "t2"
    assert extract_invocation(record, predicate=lambda name: name.startswith("B")).id == "t2"


def test_extract_invocation_missing_raises_with_context() -> None:
    record = _assistant("r1", ("t1", "Read"))

    with pytest.raises(MissingInvocationError) as excinfo:
        extract_invocation(record, "Bash")

    assert isinstance(excinfo.value, ParseError)
    assert excinfo.value.code == "MISSING_REQUIRED_FIELD"
    assert excinfo.value.context == {"tool_name": "Bash", "record_id": "r1"}


def test_extract_invocation_label_names_the_error() -> None:
    record = LogRecord(id="r1", role="assistant", content="just text")

    with pytest.raises(MissingInvocationError) as excinfo:
        extract_invocation(record, predicate=lambda _name: True, label="Grep")

    assert excinfo.value.tool_name == "Grep"


def test_extract_result_matches_by_reference() -> None:
    record = _user("r2", "other", "t1")

    result = extract_result(record, "t1")

    assert result is not None
    assert result.tool_use_id == "t1"
    assert extract_result(record, "missing") is None
    assert extract_result(None, "t1") is None


# ---------------------------------------------------------------------------
# correlate
# ---------------------------------------------------------------------------


def test_correlate_populates_base_fields(make_call, make_result) -> None:
    call = make_call("Bash", {"command": "ls"}, parent_id="root")
    result = make_result("files", raw_result={"stdout": "files"})

    correlation = correlate(call, result)

    assert correlation.base_fields() == {
        "id": "toolu_1",
        "correlation_id": "msg-call",
        "timestamp": "2024-01-01T00:00:00Z",
        "parent_id": "root",
        "duration": 1500,
    }
    assert correlation.pending is False
    assert correlation.output == "files"
    assert correlation.side_channel == {"stdout": "files"}


def test_correlate_without_result_is_pending(make_call) -> None:
    correlation = correlate(make_call("Bash"))

    assert correlation.pending is True
    assert correlation.is_error is False
    assert correlation.output is None
    assert correlation.raw_error_signal is None
    assert correlation.duration is None


def test_correlate_ignores_side_channel_of_unrelated_result(make_call, make_result) -> None:
    call = make_call("Bash")
    result = make_result("x", tool_id="someone-else", raw_result={"stdout": "x"})

    correlation = correlate(call, result)

    assert correlation.pending is True
    assert correlation.side_channel is None


def test_correlate_skips_duration_when_timestamps_disabled(make_call, make_result) -> None:
    correlation = correlate(make_call("Bash"), make_result("ok"), preserve_timestamps=False)

    assert correlation.duration is None


@pytest.mark.parametrize(
    "started, finished, expected",
    [
        ("2024-01-01T00:00:00Z", "2024-01-01T00:00:02Z", 2000),
        ("2024-01-01T00:00:00+00:00", "2024-01-01T00:00:00.250+00:00", 250),
        ("2024-01-01T00:00:05Z", "2024-01-01T00:00:00Z", None),
        ("", "2024-01-01T00:00:00Z", None),
        ("yesterday", "2024-01-01T00:00:00Z", None),
        ("2024-01-01T00:00:00", "2024-01-01T00:00:01Z", None),
    ],
)
def test_duration_ms(started: str, finished: str, expected) -> None:
    assert duration_ms(started, finished) == expected


# ---------------------------------------------------------------------------
# pair_records
# ---------------------------------------------------------------------------


def test_pair_records_matches_results_across_transcript() -> None:
    records = [
        _assistant("a1", ("t1", "Read")),
        _assistant("a2", ("t2", "Bash")),
        _user("u1", "t2"),
        _user("u2", "t1"),
    ]

    pairs = pair_records(records)

    assert [(call.id, result.id if result else None) for call, result in pairs] == [("a1", "u2"), ("a2", "u1")]


def test_pair_records_unanswered_invocation_pairs_with_none() -> None:
    pairs = pair_records([_assistant("a1", ("t1", "Read"))])

    assert len(pairs) == 1
    assert pairs[0][1] is None


def test_pair_records_splits_multi_invocation_records() -> None:
    records = [_assistant("a1", ("t1", "Read"), ("t2", "Glob")), _user("u1", "t1", "t2")]

    pairs = pair_records(records)

    assert len(pairs) == 2
    first_call, first_result = pairs[0]
    second_call, second_result = pairs[1]
    assert [block.id for block in first_call.blocks] == ["t1"]
    assert [block.id for block in second_call.blocks] == ["t2"]
    assert first_call.id == second_call.id == "a1"
    assert first_result is second_result


def test_pair_records_ignores_non_assistant_invocations() -> None:
    record = LogRecord(
        id="u0",
        role="user",
        content=[{"type": "tool_use", "id": "t1", "name": "Read", "input": {}}],
    )

    assert pair_records([record]) == []
