"""Transcript-level transform: record pairs in, props out."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from instrukt_ai_logging import get_logger

from logprops.core.correlation import pair_records
from logprops.core.records import LogRecord
from logprops.parsers.registry import ParserRegistry, invocation_name
from logprops.types.props import BaseProps

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransformResult:
    """Props for one invocation, tagged with its tool name and invocation id."""

    tool_type: str
    props: BaseProps
    correlation_id: str

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized props
        return {
            "toolType": self.tool_type,
            "correlationId": self.correlation_id,
            "props": self.props.to_dict(),
        }


class LogTransformer:
    """Runs records through a registry."""

    def __init__(self, registry: ParserRegistry) -> None:
        self.registry = registry

    def transform(self, call: LogRecord, result: Optional[LogRecord] = None) -> Optional[TransformResult]:
        tool_type = invocation_name(call)
        if not tool_type:
            logger.debug("No tool invocation in record %s", call.id)
            return None

        props = self.registry.parse(call, result)
        if props is None:
            logger.warning("Failed to parse tool %s in record %s", tool_type, call.id)
            return None

        if not props.id:
            logger.warning("No invocation id for tool %s in record %s", tool_type, call.id)
            return None

        return TransformResult(tool_type=tool_type, props=props, correlation_id=props.id)

    def transform_records(self, records: Iterable[LogRecord]) -> list[TransformResult]:
        """Pair invocations with their results across a transcript and transform each pair."""
        results: list[TransformResult] = []
        for call, result in pair_records(records):
            transformed = self.transform(call, result)
            if transformed is not None:
                results.append(transformed)
        return results
