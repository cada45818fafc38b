"""Batched file edit parser."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_bool,
    as_int,
    as_json_mapping,
    as_list,
    as_str,
    extract_error_message,
    first_decoded,
    has_any,
    pick,
    pick_int,
    pick_str,
)
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import EditDetail, EditOperation, MultiEditToolProps, MultiEditUi

_STRUCTURED_KEYS = ("edits_applied", "editsApplied", "applied", "edit_details", "editDetails")


@dataclass(frozen=True)
class MultiEditOutcome:
    message: Optional[str] = None
    edits_applied: int = 0
    all_successful: bool = False
    edit_details: tuple[EditDetail, ...] = ()
    interrupted: bool = False


def coerce_operation(raw: object, index: Optional[int] = None) -> EditOperation:
    data = as_json_mapping(raw) or {}
    return EditOperation(
        old_string=pick_str(data, "old_string", "oldString") or "",
        new_string=pick_str(data, "new_string", "newString") or "",
        replace_all=as_bool(pick(data, "replace_all", "replaceAll")) or False,
        index=as_int(data.get("index")) or index,
    )


def coerce_operations(raw: object) -> list[EditOperation]:
    return [coerce_operation(item, index + 1) for index, item in enumerate(as_list(raw) or [])]


def _coerce_detail(raw: object, index: int) -> Optional[EditDetail]:
    data = as_json_mapping(raw)
    if data is None:
        return None
    return EditDetail(
        operation=coerce_operation(data.get("operation"), index + 1),
        success=data.get("success") is True,
        replacements_made=pick_int(data, "replacements_made", "replacementsMade") or 0,
        error=pick_str(data, "error"),
    )


def _coerce_details(raw: object) -> tuple[EditDetail, ...]:
    details = (_coerce_detail(item, index) for index, item in enumerate(as_list(raw) or []))
    return tuple(detail for detail in details if detail is not None)


def _nested_output(data: Mapping[str, object]) -> Mapping[str, object]:
    """Unwrap `{output: {...}}` and `{content: [{type: tool_result, output: {...}}]}` wrappers."""
    for item in as_list(data.get("content")) or []:
        item_map = as_json_mapping(item)
        if item_map is not None and item_map.get("type") == "tool_result":
            nested = as_json_mapping(item_map.get("output"))
            if nested is not None:
                return nested
    return as_json_mapping(data.get("output")) or data


def _from_mapping(data: Optional[Mapping[str, object]]) -> Optional[MultiEditOutcome]:
    if data is None:
        return None
    data = _nested_output(data)
    if data.get("interrupted") is True:
        return MultiEditOutcome(
            message=pick_str(data, "message") or "Operation interrupted",
            edits_applied=pick_int(data, "edits_applied", "editsApplied", "applied") or 0,
            interrupted=True,
        )
    if not has_any(data, *_STRUCTURED_KEYS):
        return None
    details = _coerce_details(pick(data, "edit_details", "editDetails"))
    applied = pick_int(data, "edits_applied", "editsApplied", "applied")
    return MultiEditOutcome(
        message=pick_str(data, "message"),
        edits_applied=applied if applied is not None else sum(1 for d in details if d.success),
        all_successful=(as_bool(pick(data, "all_successful", "allSuccessful")) or False),
        edit_details=details,
    )


def _structured(ctx: DecodeContext) -> Optional[MultiEditOutcome]:
    return _from_mapping(ctx.json_structured)


def _side_channel(ctx: DecodeContext) -> Optional[MultiEditOutcome]:
    return _from_mapping(ctx.side_mapping)


def _message(ctx: DecodeContext) -> Optional[MultiEditOutcome]:
    text = ctx.plain_text
    if not text:
        return None
    # The message is display-only; counts come from the side channel's edit list
    operations = coerce_operations(pick(ctx.side_mapping, "edits"))
    details = tuple(EditDetail(operation=op, success=True, replacements_made=1) for op in operations)
    return MultiEditOutcome(
        message=text,
        edits_applied=len(details),
        all_successful=bool(details),
        edit_details=details,
    )


DECODERS: tuple[Decoder[MultiEditOutcome], ...] = (_structured, _side_channel, _message)
NO_EDITS = MultiEditOutcome(message="No edits applied")


class MultiEditToolParser(ToolParser[MultiEditToolProps]):
    """Several replacements applied to one file in one call."""

    tool_name = TOOL_NAMES["multi_edit"][0]
    aliases = TOOL_NAMES["multi_edit"][1:]
    tool_type = "file"
    supported_features = (*BASE_FEATURES, "batch-operations", "edit-details", "interrupted-support")

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> MultiEditToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        edits = coerce_operations(params.get("edits"))
        fields = {
            **correlation.base_fields(),
            "file_path": as_str(params.get("file_path")) or "",
            "edits": edits,
        }
        if correlation.pending:
            return MultiEditToolProps(
                **fields,
                status=self.status_for(correlation),
                ui=MultiEditUi(total_edits=len(edits)),
            )

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            error_message = extract_error_message(ctx, "MultiEdit failed")
            return MultiEditToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=error_message,
                ui=MultiEditUi(total_edits=len(edits), failed_edits=len(edits)),
            )

        outcome = first_decoded(DECODERS, ctx, NO_EDITS)
        details = list(outcome.edit_details)
        if details:
            successful = sum(1 for detail in details if detail.success)
            failed = len(details) - successful
        else:
            successful = outcome.edits_applied
            failed = max(len(edits) - outcome.edits_applied, 0)

        return MultiEditToolProps(
            **fields,
            status=self.status_for(correlation, interrupted=outcome.interrupted),
            message=outcome.message,
            edits_applied=outcome.edits_applied,
            all_successful=outcome.all_successful,
            edit_details=details,
            ui=MultiEditUi(
                total_edits=len(edits),
                successful_edits=successful,
                failed_edits=failed,
                change_summary=outcome.message,
            ),
        )
