"""Per-tool parsers and the registry that dispatches to them."""

from logprops.parsers.base import ParserMetadata, ToolParser, ValidationResult

__all__ = ["ParserMetadata", "ToolParser", "ValidationResult"]
