"""Pytest configuration for logprops tests."""

import logging
from typing import Callable, Optional

import pytest

try:
    import instrukt_ai_logging

    def _noop_configure_logging(*_args, **_kwargs):  # type: ignore[no-untyped-def]
        return None

    instrukt_ai_logging.configure_logging = _noop_configure_logging  # type: ignore[assignment]
    logging.getLogger("logprops").handlers.clear()
    logging.getLogger().handlers.clear()
except Exception:
    pass

from logprops.core.records import LogRecord

CALL_TIMESTAMP = "2024-01-01T00:00:00Z"
RESULT_TIMESTAMP = "2024-01-01T00:00:01.500Z"


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))


@pytest.fixture
def make_call() -> Callable[..., LogRecord]:
    """Factory for an assistant record holding one tool invocation."""

    def _make(
        name: str,
        tool_input: Optional[dict] = None,
        *,
        tool_id: str = "toolu_1",
        record_id: str = "msg-call",
        timestamp: str = CALL_TIMESTAMP,
        parent_id: Optional[str] = None,
    ) -> LogRecord:
        return LogRecord(
            id=record_id,
            timestamp=timestamp,
            role="assistant",
            parent_id=parent_id,
            content=[{"type": "tool_use", "id": tool_id, "name": name, "input": tool_input or {}}],
        )

    return _make


@pytest.fixture
def make_result() -> Callable[..., LogRecord]:
    """Factory for a user record holding one tool result."""

    def _make(
        output: object = None,
        *,
        is_error: object = False,
        tool_id: str = "toolu_1",
        raw_result: object = None,
        record_id: str = "msg-result",
        timestamp: str = RESULT_TIMESTAMP,
    ) -> LogRecord:
        return LogRecord(
            id=record_id,
            timestamp=timestamp,
            role="user",
            content=[{"type": "tool_result", "tool_use_id": tool_id, "is_error": is_error, "output": output}],
            raw_result=raw_result,
        )

    return _make
