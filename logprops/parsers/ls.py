"""Directory listing parser.

Listings arrive as structured `{entries|files}` lists, as Claude Code's
indented tree text (`- name/`), or as `name size type modified` columns.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_list,
    as_mapping,
    as_str,
    extract_error_message,
    first_decoded,
    pick,
    pick_int,
    pick_str,
)
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import FileEntry, FileEntryType, LsToolProps, LsUi

_TREE_LINE = re.compile(r"^(?P<indent>\s*)- (?P<name>.+?)\s*$")
_DIRECTORY_HINTS = frozenset({"directory", "dir", "d"})
_SYMLINK_HINTS = frozenset({"symlink", "link", "l"})
# Claude Code appends a safety note after the tree
_TREE_FOOTER = "NOTE:"


@dataclass(frozen=True)
class Listing:
    entries: tuple[FileEntry, ...] = ()
    total_size: Optional[int] = None
    entry_count: Optional[int] = None
    interrupted: bool = False


def entry_type(name: str, hint: Optional[str] = None, is_directory: bool = False) -> FileEntryType:
    if hint is not None:
        lowered = hint.strip().lower()
        if lowered in _DIRECTORY_HINTS:
            return "directory"
        if lowered in _SYMLINK_HINTS:
            return "symlink"
        if lowered == "file" or lowered == "f":
            return "file"
    if is_directory or name.endswith("/"):
        return "directory"
    return "file"


def _make_entry(
    name: str,
    type_hint: Optional[str] = None,
    *,
    is_directory: bool = False,
    size: Optional[int] = None,
    permissions: Optional[str] = None,
    last_modified: Optional[str] = None,
) -> FileEntry:
    kind = entry_type(name, type_hint, is_directory)
    clean = name.rstrip("/") or name
    base_name = clean.rsplit("/", 1)[-1]
    return FileEntry(
        name=clean,
        type=kind,
        size=size,
        permissions=permissions,
        last_modified=last_modified,
        is_hidden=base_name.startswith("."),
    )


def _coerce_entry(raw: object) -> Optional[FileEntry]:
    if isinstance(raw, str):
        return _make_entry(raw) if raw.strip() else None
    data = as_mapping(raw)
    if data is None:
        return None
    name = pick_str(data, "name", "filename", "path")
    if not name:
        return None
    return _make_entry(
        name,
        pick_str(data, "type"),
        is_directory=data.get("isDirectory") is True or data.get("is_directory") is True,
        size=pick_int(data, "size"),
        permissions=pick_str(data, "permissions"),
        last_modified=pick_str(data, "lastModified", "last_modified", "modified", "mtime"),
    )


def _from_mapping(data: Optional[Mapping[str, object]]) -> Optional[Listing]:
    if data is None:
        return None
    if data.get("interrupted") is True:
        return Listing(interrupted=True)
    items = as_list(pick(data, "entries", "files"))
    if items is None:
        return None
    entries = tuple(entry for entry in (_coerce_entry(item) for item in items) if entry is not None)
    return Listing(
        entries=entries,
        total_size=pick_int(data, "totalSize", "total_size"),
        entry_count=pick_int(data, "entryCount", "entry_count"),
    )


def parse_tree(text: str, root: str = "") -> Optional[Listing]:
    """Parse Claude Code's indented `- name/` tree. None when the text is not a tree."""
    root_clean = root.rstrip("/")
    entries: list[FileEntry] = []
    matched = False
    for index, line in enumerate(text.split("\n")):
        if line.startswith(_TREE_FOOTER):
            break
        match = _TREE_LINE.match(line)
        if match is None:
            continue
        matched = True
        name = match.group("name")
        # The first unindented line echoes the listed directory itself
        if index == 0 and not match.group("indent") and (name.rstrip("/") == root_clean or name.startswith("/")):
            continue
        entries.append(_make_entry(name))
    return Listing(entries=tuple(entries)) if matched else None


def parse_columns(text: str) -> Listing:
    """Parse `name size [type] [modified]` rows."""
    entries: list[FileEntry] = []
    for line in text.strip().split("\n"):
        parts = line.split()
        if not parts:
            continue
        name = parts[0]
        size = int(parts[1]) if len(parts) > 1 and parts[1].isdecimal() else None
        type_hint = parts[2] if len(parts) > 2 else None
        modified = parts[3] if len(parts) > 3 else None
        entries.append(_make_entry(name, type_hint, size=size, last_modified=modified))
    return Listing(entries=tuple(entries))


def _structured(ctx: DecodeContext) -> Optional[Listing]:
    return _from_mapping(ctx.structured)


def _side_channel(ctx: DecodeContext) -> Optional[Listing]:
    return _from_mapping(ctx.side_mapping)


def _list_output(ctx: DecodeContext) -> Optional[Listing]:
    items = as_list(ctx.output)
    if items is None:
        return None
    return Listing(entries=tuple(entry for entry in (_coerce_entry(item) for item in items) if entry is not None))


def _text(ctx: DecodeContext) -> Optional[Listing]:
    text = ctx.text
    if text is None:
        return None
    root = as_str(ctx.input.get("path")) or ""
    return parse_tree(text, root) or parse_columns(text)


DECODERS: tuple[Decoder[Listing], ...] = (_structured, _side_channel, _list_output, _text)


class LsToolParser(ToolParser[LsToolProps]):
    """Directory listings normalized to typed entries."""

    tool_name = TOOL_NAMES["ls"][0]
    aliases = TOOL_NAMES["ls"][1:]
    tool_type = "file"
    supported_features = (*BASE_FEATURES, "directory-listing", "hidden-detection", "tree-format")

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> LsToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        ignore = [item for item in as_list(params.get("ignore")) or [] if isinstance(item, str)]
        fields = {
            **correlation.base_fields(),
            "path": as_str(params.get("path")) or "",
            "ignore": ignore,
        }
        if correlation.pending:
            return LsToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return LsToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=extract_error_message(ctx, "Failed to list directory"),
            )

        listing = first_decoded(DECODERS, ctx, Listing())
        entries = list(listing.entries)
        total_size = listing.total_size
        if total_size is None:
            total_size = sum(entry.size or 0 for entry in entries)

        return LsToolProps(
            **fields,
            status=self.status_for(correlation, interrupted=listing.interrupted),
            entries=entries,
            entry_count=listing.entry_count if listing.entry_count is not None else len(entries),
            ui=LsUi(
                total_files=sum(1 for entry in entries if entry.type == "file"),
                total_directories=sum(1 for entry in entries if entry.type == "directory"),
                total_size=total_size,
            ),
        )
