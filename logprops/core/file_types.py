"""File extension to display-language lookup."""

from typing import Optional

from logprops.constants import DEFAULT_FILE_TYPE

FILE_TYPES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescriptreact",
    "js": "javascript",
    "jsx": "javascriptreact",
    "py": "python",
    "rs": "rust",
    "go": "go",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "scala": "scala",
    "r": "r",
    "sql": "sql",
    "sh": "bash",
    "yaml": "yaml",
    "yml": "yaml",
    "json": "json",
    "xml": "xml",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "less": "less",
    "md": "markdown",
    "mdx": "mdx",
    "txt": "plaintext",
    "log": "log",
    "conf": "properties",
    "ini": "ini",
    "toml": "toml",
}


def infer_file_type(path: Optional[str]) -> str:
    """Display language for `path`, "plaintext" when unknown."""
    if not path or "." not in path:
        return DEFAULT_FILE_TYPE
    extension = path.rsplit(".", 1)[1].lower()
    return FILE_TYPES.get(extension, DEFAULT_FILE_TYPE)
