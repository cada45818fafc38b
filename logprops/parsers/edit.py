"""Single in-place file edit parser."""

from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import as_bool, as_str, extract_error_message, pick_str
from logprops.core.diff import diff_lines
from logprops.core.file_types import infer_file_type
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import EditToolProps


class EditToolParser(ToolParser[EditToolProps]):
    """One old_string/new_string replacement, with a line diff."""

    tool_name = TOOL_NAMES["edit"][0]
    aliases = TOOL_NAMES["edit"][1:]
    tool_type = "file"
    supported_features = (*BASE_FEATURES, "diff-generation", "file-type-inference", "replace-all")

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> EditToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        ctx = self.decode_context(correlation)
        # Claude Code mirrors the edit in the side channel; input wins
        side = ctx.side_mapping

        file_path = as_str(params.get("file_path")) or pick_str(side, "filePath", "file_path") or ""
        old_content = as_str(params.get("old_string"))
        if old_content is None:
            old_content = pick_str(side, "oldString", "old_string") or ""
        new_content = as_str(params.get("new_string"))
        if new_content is None:
            new_content = pick_str(side, "newString", "new_string") or ""

        error_message = None
        if ctx.is_error:
            error_message = extract_error_message(ctx, "Edit failed")

        return EditToolProps(
            **correlation.base_fields(),
            status=self.status_for(correlation),
            file_path=file_path,
            old_content=old_content,
            new_content=new_content,
            replace_all=as_bool(params.get("replace_all")) or False,
            diff=diff_lines(old_content, new_content),
            file_type=infer_file_type(file_path),
            error_message=error_message,
        )
