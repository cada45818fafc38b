"""File read parser."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_int,
    as_mapping,
    as_str,
    extract_error_message,
    first_decoded,
    pick_int,
    pick_str,
)
from logprops.core.diff import split_lines
from logprops.core.file_types import infer_file_type
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import ReadToolProps


@dataclass(frozen=True)
class FileContent:
    content: str
    # Line count of the whole file when the producer reports it
    total_lines: Optional[int] = None


def _from_mapping(data: Optional[Mapping[str, object]]) -> Optional[FileContent]:
    if data is None:
        return None
    # Claude Code: {type: "text", file: {filePath, content, numLines, startLine, totalLines}}
    file_info = as_mapping(data.get("file"))
    if file_info is not None:
        content = pick_str(file_info, "content")
        if content is not None:
            return FileContent(content=content, total_lines=pick_int(file_info, "totalLines", "total_lines"))
    content = pick_str(data, "content")
    if content is None:
        return None
    return FileContent(content=content, total_lines=pick_int(data, "totalLines", "total_lines"))


def _structured(ctx: DecodeContext) -> Optional[FileContent]:
    return _from_mapping(ctx.structured)


def _side_channel(ctx: DecodeContext) -> Optional[FileContent]:
    return _from_mapping(ctx.side_mapping)


def _plain_text(ctx: DecodeContext) -> Optional[FileContent]:
    text = as_str(ctx.output)
    return FileContent(content=text) if text is not None else None


DECODERS: tuple[Decoder[FileContent], ...] = (_structured, _side_channel, _plain_text)


class ReadToolParser(ToolParser[ReadToolProps]):
    """File reads, with line counting and truncation detection."""

    tool_name = TOOL_NAMES["read"][0]
    aliases = TOOL_NAMES["read"][1:]
    tool_type = "file"
    supported_features = (
        *BASE_FEATURES,
        "file-type-inference",
        "line-counting",
        "size-estimation",
        "truncation-detection",
        "offset-limit",
    )

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> ReadToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        file_path = as_str(params.get("file_path")) or ""
        limit = as_int(params.get("limit"))
        fields = {
            **correlation.base_fields(),
            "file_path": file_path,
            "file_type": infer_file_type(file_path),
            "offset": as_int(params.get("offset")),
            "limit": limit,
        }
        if correlation.pending:
            return ReadToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return ReadToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=extract_error_message(ctx, "Failed to read file"),
            )

        decoded = first_decoded(DECODERS, ctx, FileContent(content=""))
        content = decoded.content
        line_count = len(split_lines(content))
        file_size = len(content.encode("utf-8"))
        total_lines = decoded.total_lines if decoded.total_lines is not None else line_count

        truncated = (limit is not None and limit > 0 and total_lines > limit) or total_lines > line_count
        max_length = self.settings.max_content_length
        if max_length is not None and len(content) > max_length:
            content = content[:max_length]
            truncated = True

        return ReadToolProps(
            **fields,
            status=self.status_for(correlation),
            content=content,
            total_lines=total_lines,
            file_size=file_size,
            truncated=truncated,
        )
