"""Props records handed to the rendering layer.

One frozen model per tool. Field names are snake_case in Python and
serialize with camelCase aliases through `to_dict()`; `None` fields are
omitted.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from logprops.core.diff import DiffLine
from logprops.core.output_shape import DisplayMode
from logprops.core.status import ToolStatus
from logprops.types.todos import TodoChange, TodoItem

TodoOperation = Literal["create", "update", "replace", "clear"]
TodoChangesSource = Literal["diff", "counts", "legacy-message", "input"]
FileEntryType = Literal["file", "directory", "symlink"]


class PropsModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized props
        return self.model_dump(by_alias=True, exclude_none=True)


class BaseProps(PropsModel):
    """Fields every props record carries."""

    id: str
    correlation_id: str
    timestamp: str
    status: ToolStatus
    parent_id: Optional[str] = None
    # Milliseconds between invocation and result
    duration: Optional[int] = None


# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


class BashToolProps(BaseProps):
    command: str = ""
    description: Optional[str] = None
    timeout: Optional[int] = None
    output: str = ""
    error_output: str = ""
    exit_code: Optional[int] = None
    working_directory: Optional[str] = None
    interrupted: bool = False


# ---------------------------------------------------------------------------
# File edits
# ---------------------------------------------------------------------------


class EditToolProps(BaseProps):
    file_path: str = ""
    old_content: str = ""
    new_content: str = ""
    replace_all: bool = False
    diff: list[DiffLine] = Field(default_factory=list)
    file_type: str = "plaintext"
    error_message: Optional[str] = None


class EditOperation(PropsModel):
    old_string: str = ""
    new_string: str = ""
    replace_all: bool = False
    # 1-based position within the batch
    index: Optional[int] = None


class EditDetail(PropsModel):
    operation: EditOperation
    success: bool = False
    replacements_made: int = 0
    error: Optional[str] = None


class MultiEditUi(PropsModel):
    total_edits: int = 0
    successful_edits: int = 0
    failed_edits: int = 0
    change_summary: Optional[str] = None


class MultiEditToolProps(BaseProps):
    file_path: str = ""
    edits: list[EditOperation] = Field(default_factory=list)
    message: Optional[str] = None
    edits_applied: int = 0
    all_successful: bool = False
    edit_details: list[EditDetail] = Field(default_factory=list)
    error_message: Optional[str] = None
    ui: MultiEditUi = Field(default_factory=MultiEditUi)


# ---------------------------------------------------------------------------
# File read / write
# ---------------------------------------------------------------------------


class ReadToolProps(BaseProps):
    file_path: str = ""
    content: str = ""
    file_type: str = "plaintext"
    total_lines: int = 0
    file_size: int = 0
    truncated: bool = False
    offset: Optional[int] = None
    limit: Optional[int] = None
    error_message: Optional[str] = None


class WriteToolProps(BaseProps):
    file_path: str = ""
    content: str = ""
    file_type: str = "plaintext"
    created: bool = False
    overwritten: bool = False
    error_message: Optional[str] = None


# ---------------------------------------------------------------------------
# Path glob / directory listing
# ---------------------------------------------------------------------------


class GlobUi(PropsModel):
    total_matches: int = 0
    truncated: bool = False


class GlobToolProps(BaseProps):
    pattern: str = ""
    search_path: Optional[str] = None
    matches: list[str] = Field(default_factory=list)
    error_message: Optional[str] = None
    ui: GlobUi = Field(default_factory=GlobUi)


class FileEntry(PropsModel):
    name: str
    type: FileEntryType = "file"
    size: Optional[int] = None
    permissions: Optional[str] = None
    last_modified: Optional[str] = None
    is_hidden: bool = False


class LsUi(PropsModel):
    total_files: int = 0
    total_directories: int = 0
    total_size: int = 0


class LsToolProps(BaseProps):
    path: str = ""
    ignore: list[str] = Field(default_factory=list)
    entries: list[FileEntry] = Field(default_factory=list)
    entry_count: int = 0
    error_message: Optional[str] = None
    ui: LsUi = Field(default_factory=LsUi)


# ---------------------------------------------------------------------------
# Todo lists
# ---------------------------------------------------------------------------


class TodoReadUi(PropsModel):
    total_todos: int = 0
    completed_todos: int = 0
    pending_todos: int = 0
    in_progress_todos: int = 0


class TodoReadToolProps(BaseProps):
    todos: list[TodoItem] = Field(default_factory=list)
    status_counts: dict[str, int] = Field(default_factory=dict)
    priority_counts: dict[str, int] = Field(default_factory=dict)
    error_message: Optional[str] = None
    ui: TodoReadUi = Field(default_factory=TodoReadUi)


class TodoWriteUi(PropsModel):
    total_todos: int = 0
    added_count: int = 0
    modified_count: int = 0
    deleted_count: int = 0
    written_count: int = 0


class TodoWriteToolProps(BaseProps):
    todos: list[TodoItem] = Field(default_factory=list)
    changes: list[TodoChange] = Field(default_factory=list)
    operation: TodoOperation = "clear"
    # Where `changes` came from; "legacy-message" marks regex-derived counts
    changes_source: TodoChangesSource = "input"
    message: Optional[str] = None
    error_message: Optional[str] = None
    ui: TodoWriteUi = Field(default_factory=TodoWriteUi)


# ---------------------------------------------------------------------------
# Content search
# ---------------------------------------------------------------------------


class SearchMatch(PropsModel):
    line_number: int
    line_content: str
    match_start: int = 0
    match_end: int = 0


class SearchResult(PropsModel):
    file_path: str
    matches: list[SearchMatch] = Field(default_factory=list)
    match_count: int = 0


class GrepUi(PropsModel):
    total_matches: int = 0
    files_with_matches: int = 0


class GrepToolProps(BaseProps):
    pattern: str = ""
    search_path: Optional[str] = None
    file_patterns: list[str] = Field(default_factory=list)
    case_sensitive: bool = True
    output_mode: Optional[str] = None
    results: list[SearchResult] = Field(default_factory=list)
    error_message: Optional[str] = None
    ui: GrepUi = Field(default_factory=GrepUi)


# ---------------------------------------------------------------------------
# Generic external tools
# ---------------------------------------------------------------------------


class GenericUi(PropsModel):
    display_mode: DisplayMode = "empty"
    is_structured: bool = False
    has_nested_data: bool = False
    key_count: int = 0
    is_complex: bool = False
    is_large: bool = False
    show_raw_json: bool = False
    collapsible: bool = False


class GenericToolProps(BaseProps):
    tool_name: str
    server_name: str = "unknown"
    method_name: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    error_message: Optional[str] = None
    ui: GenericUi = Field(default_factory=GenericUi)


ToolProps = Union[
    BashToolProps,
    EditToolProps,
    MultiEditToolProps,
    ReadToolProps,
    WriteToolProps,
    GlobToolProps,
    LsToolProps,
    TodoReadToolProps,
    TodoWriteToolProps,
    GrepToolProps,
    GenericToolProps,
]
