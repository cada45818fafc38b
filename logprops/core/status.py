"""Canonical tool status derivation.

Every parser derives its status through `map_status`. The normalized value
is a pure function of three signals (interrupted, result absent, error);
`original` echoes whatever raw signal the caller had, so different raw
encodings of the same outcome stay distinguishable in diagnostics.

Free-form status strings (as some integrations report them) go through
`map_status_value`: an explicit per-tool table first, keyword inference
second.
"""

from __future__ import annotations

import re
from typing import Any, Literal, Optional

from instrukt_ai_logging import get_logger
from pydantic import BaseModel, ConfigDict

logger = get_logger(__name__)

NormalizedStatus = Literal["pending", "running", "completed", "failed", "interrupted", "unknown"]

# ---------------------------------------------------------------------------
# Status model
# ---------------------------------------------------------------------------


class StatusDetails(BaseModel):
    """Optional extra status information."""

    model_config = ConfigDict(frozen=True)

    interrupted: Optional[bool] = None
    progress: Optional[float] = None
    substatus: Optional[str] = None


class ToolStatus(BaseModel):
    """Normalized status plus the raw signal it came from."""

    model_config = ConfigDict(frozen=True)

    normalized: NormalizedStatus
    original: Any = None
    details: Optional[StatusDetails] = None

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized props
        return self.model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Boolean signal mapping
# ---------------------------------------------------------------------------

_UNSET: Any = object()


def map_status(
    is_error: Optional[bool],
    result_absent: bool = False,
    interrupted: bool = False,
    *,
    original: Any = _UNSET,
) -> ToolStatus:
    """Map (error, absent, interrupted) to a ToolStatus.

    Precedence, highest first: interrupted, pending, failed, completed.

    Args:
        is_error: Error flag from the result block, None when unknown.
        result_absent: True when no result block was found.
        interrupted: True when the tool reported an interruption.
        original: Raw signal to echo. Defaults to `is_error` as given.
    """
    raw = is_error if original is _UNSET else original
    if interrupted:
        return ToolStatus(normalized="interrupted", original=raw, details=StatusDetails(interrupted=True))
    if result_absent:
        return ToolStatus(normalized="pending", original=raw)
    if is_error:
        return ToolStatus(normalized="failed", original=raw)
    return ToolStatus(normalized="completed", original=raw)


# ---------------------------------------------------------------------------
# Free-form status strings
# ---------------------------------------------------------------------------

STATUS_VALUE_MAPPINGS: dict[str, dict[str, NormalizedStatus]] = {
    "mcp-puppeteer": {"success": "completed", "error": "failed", "partial": "running"},
    "mcp-context7": {"resolved": "completed", "failed": "failed", "not_found": "failed"},
    "mcp-sequential-thinking": {"in_progress": "running", "completed": "completed", "failed": "failed"},
    "bash": {"success": "completed", "error": "failed", "timeout": "failed", "interrupted": "interrupted"},
    "read": {"success": "completed", "error": "failed", "not_found": "failed"},
    "write": {"success": "completed", "error": "failed", "permission_denied": "failed"},
    "edit": {"success": "completed", "error": "failed", "no_match": "failed"},
    "grep": {"success": "completed", "error": "failed", "no_matches": "completed"},
}

# Checked in order; first keyword hit wins
_KEYWORD_RULES: tuple[tuple[NormalizedStatus, tuple[str, ...]], ...] = (
    ("completed", ("success", "complete", "done", "resolved")),
    ("interrupted", ("interrupt", "cancel", "stopped", "abort")),
    ("failed", ("error", "fail", "crash", "exception", "timeout")),
    ("pending", ("pending", "wait", "queue", "scheduled")),
    ("running", ("running", "progress", "partial", "processing", "executing")),
)

_EXACT_VALUES: dict[str, NormalizedStatus] = {
    "ok": "completed",
    "true": "completed",
    "false": "failed",
}


def _infer_status(value: str) -> NormalizedStatus:
    lower = value.strip().lower()
    if lower in _EXACT_VALUES:
        return _EXACT_VALUES[lower]
    if re.search(r"\bok\b", lower):
        return "completed"
    for normalized, keywords in _KEYWORD_RULES:
        if any(keyword in lower for keyword in keywords):
            return normalized
    return "unknown"


def map_status_value(tool_type: str, original_status: str) -> ToolStatus:
    """Map a free-form status string reported by a tool."""
    mapping = STATUS_VALUE_MAPPINGS.get(tool_type.lower(), {})
    explicit = mapping.get(original_status)
    if explicit is not None:
        return ToolStatus(normalized=explicit, original=original_status)

    normalized = _infer_status(original_status)
    if normalized == "unknown":
        logger.warning("Unknown status mapping %s:%s, consider adding an explicit entry", tool_type, original_status)
    return ToolStatus(normalized=normalized, original=original_status)


def map_status_with_progress(
    tool_type: str,
    original_status: str,
    progress: Optional[float] = None,
    substatus: Optional[str] = None,
) -> ToolStatus:
    """Like map_status_value, with progress details attached when given."""
    base = map_status_value(tool_type, original_status)
    if progress is None and not substatus:
        return base
    return base.model_copy(update={"details": StatusDetails(progress=progress, substatus=substatus or None)})


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_terminal(status: ToolStatus) -> bool:
    return status.normalized in ("completed", "failed", "interrupted", "unknown")


def is_success(status: ToolStatus) -> bool:
    return status.normalized == "completed"


def is_failure(status: ToolStatus) -> bool:
    return status.normalized == "failed"


def is_interrupted(status: ToolStatus) -> bool:
    return status.normalized == "interrupted"
