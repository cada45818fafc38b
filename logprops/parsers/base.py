"""Abstract base class for tool parsers.

A parser turns one invocation record (and, optionally, the record holding
its result) into a props record for one tool. Parsers never raise on
malformed result shapes; the only raising path is a record with no
qualifying invocation block.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Generic, Optional, TypeVar

from logprops.config.schema import ParserSettings
from logprops.constants import ASSISTANT_ROLE, DEFAULT_PARSER_VERSION
from logprops.core.correlation import Correlation, correlate
from logprops.core.decoders import DecodeContext
from logprops.core.records import LogRecord
from logprops.core.status import ToolStatus, map_status
from logprops.types.props import BaseProps

P = TypeVar("P", bound=BaseProps)

BASE_FEATURES: tuple[str, ...] = ("basic-parsing", "status-mapping", "correlation")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a pre-parse structural check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParserMetadata:
    tool_name: str
    tool_type: str
    version: str
    supported_features: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized metadata
        return asdict(self)


class ToolParser(ABC, Generic[P]):
    """Base class for all tool parsers."""

    tool_name: str = ""
    aliases: tuple[str, ...] = ()
    tool_type: str = "other"
    version: str = DEFAULT_PARSER_VERSION
    supported_features: tuple[str, ...] = BASE_FEATURES

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()

    @property
    def tool_names(self) -> tuple[str, ...]:
        return (self.tool_name, *self.aliases)

    def accepts_name(self, name: str) -> bool:
        """Check whether an invocation name belongs to this parser."""
        return name in self.tool_names

    def can_parse(self, record: LogRecord) -> bool:
        """Check if this parser can handle the given record."""
        if record.role != ASSISTANT_ROLE:
            return False
        return any(block.kind == "tool-invocation" and self.accepts_name(block.name) for block in record.blocks)

    def validate(self, record: LogRecord) -> ValidationResult:
        """Structural pre-parse check. Never raises."""
        errors: list[str] = []
        warnings: list[str] = []

        if record.role != ASSISTANT_ROLE:
            errors.append(f'Record must have role "{ASSISTANT_ROLE}"')
        if not record.id:
            errors.append("Record missing required id")
        if not record.timestamp:
            errors.append("Record missing required timestamp")

        invocation = next(
            (block for block in record.blocks if block.kind == "tool-invocation" and self.accepts_name(block.name)),
            None,
        )
        if invocation is None:
            errors.append(f"No tool invocation block found for {self.tool_name}")
        else:
            if not invocation.id:
                errors.append("Tool invocation block missing required id")
            if not invocation.input:
                warnings.append("Tool invocation block has empty input")

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def metadata(self) -> ParserMetadata:
        return ParserMetadata(
            tool_name=self.tool_name,
            tool_type=self.tool_type,
            version=self.version,
            supported_features=self.supported_features,
            aliases=self.aliases,
        )

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def correlate(self, call: LogRecord, result: Optional[LogRecord]) -> Correlation:
        return correlate(
            call,
            result,
            predicate=self.accepts_name,
            label=self.tool_name,
            preserve_timestamps=self.settings.preserve_timestamps,
        )

    @staticmethod
    def decode_context(correlation: Correlation) -> DecodeContext:
        return DecodeContext(
            output=correlation.output,
            is_error=correlation.is_error,
            side_channel=correlation.side_channel,
            input=correlation.invocation.input,
        )

    @staticmethod
    def status_for(
        correlation: Correlation,
        *,
        interrupted: bool = False,
        failed: Optional[bool] = None,
    ) -> ToolStatus:
        """Derive status; `failed` overrides the result block's error flag."""
        is_error = correlation.is_error if failed is None else failed
        return map_status(
            None if correlation.pending else is_error,
            result_absent=correlation.pending,
            interrupted=interrupted and not correlation.pending,
            original=correlation.raw_error_signal,
        )

    @abstractmethod
    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> P:
        """Build props for `call` and its optional result record.

        Raises:
            MissingInvocationError: `call` holds no invocation this parser accepts.
        """
        pass
