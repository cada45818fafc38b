"""Constants used across logprops.

This module defines shared constants to ensure consistency between parsers.
"""

# Roles
ASSISTANT_ROLE = "assistant"

# Tool names as written by Claude Code, plus the neutral aliases used by
# exported / re-encoded logs. Matching is exact and case-sensitive.
TOOL_NAMES: dict[str, tuple[str, ...]] = {
    "bash": ("Bash", "command-exec"),
    "edit": ("Edit", "file-edit"),
    "multi_edit": ("MultiEdit", "multi-edit"),
    "read": ("Read", "file-read"),
    "write": ("Write", "file-write"),
    "glob": ("Glob", "path-glob"),
    "ls": ("LS", "directory-list"),
    "todo_read": ("TodoRead", "todo-read"),
    "todo_write": ("TodoWrite", "todo-write"),
    "grep": ("Grep", "content-search"),
}

# Reserved prefixes routed to the generic tool-call parser
GENERIC_TOOL_PREFIXES: tuple[str, ...] = ("generic-integration__", "mcp__", "mcp_")

# Todo identifiers carrying one of these prefixes were minted client-side
FRESH_TODO_PREFIXES: tuple[str, ...] = ("temp-", "todo-")

# Output shape thresholds
LARGE_TEXT_CHARS = 1000
LARGE_LIST_ITEMS = 10
COMPLEX_TABLE_ROWS = 5
COMPLEX_OBJECT_KEYS = 10
LARGE_OBJECT_KEYS = 20

DEFAULT_FILE_TYPE = "plaintext"
DEFAULT_PARSER_VERSION = "1.0.0"
