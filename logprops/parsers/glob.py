"""Path glob parser."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_list,
    as_str,
    extract_error_message,
    first_decoded,
    pick,
)
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import GlobToolProps, GlobUi

NO_MATCHES_MARKER = "no files found"
TRUNCATION_MARKER = "(results are truncated"


@dataclass(frozen=True)
class GlobOutcome:
    matches: tuple[str, ...] = ()
    truncated: bool = False


def _clean(items: list[object]) -> tuple[str, ...]:
    return tuple(item.strip() for item in items if isinstance(item, str) and item.strip())


def _from_mapping(data: Optional[Mapping[str, object]]) -> Optional[GlobOutcome]:
    if data is None:
        return None
    items = as_list(pick(data, "filenames", "matches", "files"))
    if items is None:
        return None
    return GlobOutcome(matches=_clean(items), truncated=data.get("truncated") is True)


def _list_output(ctx: DecodeContext) -> Optional[GlobOutcome]:
    items = as_list(ctx.output)
    return GlobOutcome(matches=_clean(items)) if items is not None else None


def _structured(ctx: DecodeContext) -> Optional[GlobOutcome]:
    return _from_mapping(ctx.structured)


def _side_channel(ctx: DecodeContext) -> Optional[GlobOutcome]:
    return _from_mapping(ctx.side_mapping)


def _text(ctx: DecodeContext) -> Optional[GlobOutcome]:
    text = ctx.text
    if text is None:
        return None
    matches: list[str] = []
    truncated = False
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        lowered = stripped.lower()
        if lowered.startswith(NO_MATCHES_MARKER):
            continue
        if lowered.startswith(TRUNCATION_MARKER):
            truncated = True
            continue
        matches.append(stripped)
    return GlobOutcome(matches=tuple(matches), truncated=truncated)


DECODERS: tuple[Decoder[GlobOutcome], ...] = (_list_output, _structured, _side_channel, _text)


class GlobToolParser(ToolParser[GlobToolProps]):
    """File path pattern matches."""

    tool_name = TOOL_NAMES["glob"][0]
    aliases = TOOL_NAMES["glob"][1:]
    tool_type = "search"
    supported_features = (*BASE_FEATURES, "pattern-matching", "path-filtering", "truncation-detection")

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> GlobToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        fields = {
            **correlation.base_fields(),
            "pattern": as_str(params.get("pattern")) or "",
            "search_path": as_str(params.get("path")),
        }
        if correlation.pending:
            return GlobToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return GlobToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=extract_error_message(ctx, "Glob search failed"),
            )

        outcome = first_decoded(DECODERS, ctx, GlobOutcome())
        return GlobToolProps(
            **fields,
            status=self.status_for(correlation),
            matches=list(outcome.matches),
            ui=GlobUi(total_matches=len(outcome.matches), truncated=outcome.truncated),
        )
