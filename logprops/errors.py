"""Exceptions raised by the normalization pipeline.

Only structural defects raise. Shape defects inside a record are recovered
locally by each parser and never reach this module.
"""

from typing import Literal

ParseErrorCode = Literal[
    "INVALID_RECORD_FORMAT",
    "MISSING_CORRELATION_DATA",
    "MISSING_REQUIRED_FIELD",
    "INVALID_FIELD_TYPE",
    "UNSUPPORTED_TOOL_TYPE",
    "STATUS_MAPPING_FAILED",
    "VALIDATION_FAILED",
]


class ParseError(ValueError):
    """Raised when a record cannot be turned into props at all."""

    def __init__(
        self,
        message: str,
        code: ParseErrorCode,
        *,
        context: dict[str, object] | None = None,  # guard: loose-dict - diagnostic context
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code: ParseErrorCode = code
        self.context: dict[str, object] = dict(context or {})  # guard: loose-dict - diagnostic context

    def __str__(self) -> str:
        return self.message


class MissingInvocationError(ParseError):
    """No qualifying tool invocation block exists in the record."""

    def __init__(self, tool_name: str, record_id: str = "") -> None:
        super().__init__(
            f"No tool invocation block found for {tool_name}",
            "MISSING_REQUIRED_FIELD",
            context={"tool_name": tool_name, "record_id": record_id},
        )
        self.tool_name = tool_name
        self.record_id = record_id
