"""File write parser."""

from collections.abc import Mapping
from typing import Literal, Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import DecodeContext, Decoder, as_str, extract_error_message, first_decoded, pick_str
from logprops.core.file_types import infer_file_type
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import WriteToolProps

WriteKind = Literal["create", "update"]

_KIND_VALUES: dict[str, WriteKind] = {
    "create": "create",
    "created": "create",
    "update": "update",
    "updated": "update",
    "overwrite": "update",
}


def _kind_from(data: Optional[Mapping[str, object]]) -> Optional[WriteKind]:
    value = pick_str(data, "type", "operation")
    if value is None:
        return None
    return _KIND_VALUES.get(value.strip().lower())


def _structured(ctx: DecodeContext) -> Optional[WriteKind]:
    return _kind_from(ctx.structured)


def _side_channel(ctx: DecodeContext) -> Optional[WriteKind]:
    return _kind_from(ctx.side_mapping)


def _legacy_message(ctx: DecodeContext) -> Optional[WriteKind]:
    text = ctx.text or ""
    if "created successfully" in text:
        return "create"
    if "updated successfully" in text:
        return "update"
    return None


DECODERS: tuple[Decoder[WriteKind], ...] = (_structured, _side_channel, _legacy_message)


class WriteToolParser(ToolParser[WriteToolProps]):
    """Whole-file writes, distinguishing creation from overwrite."""

    tool_name = TOOL_NAMES["write"][0]
    aliases = TOOL_NAMES["write"][1:]
    tool_type = "file"
    supported_features = (*BASE_FEATURES, "file-type-inference", "create-overwrite-detection")

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> WriteToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        file_path = as_str(params.get("file_path")) or ""
        fields = {
            **correlation.base_fields(),
            "file_path": file_path,
            "content": as_str(params.get("content")) or "",
            "file_type": infer_file_type(file_path),
        }
        if correlation.pending:
            return WriteToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return WriteToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=extract_error_message(ctx, "Failed to write file"),
            )

        kind = first_decoded(DECODERS, ctx, "create")
        return WriteToolProps(
            **fields,
            status=self.status_for(correlation),
            created=kind == "create",
            overwritten=kind == "update",
        )
