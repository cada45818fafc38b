"""Public package surface."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from logprops.core.records import LogRecord, normalize_content
from logprops.errors import MissingInvocationError, ParseError
from logprops.parsers.registry import ParserRegistry, build_default_registry
from logprops.transformer import LogTransformer, TransformResult


def _resolve_version() -> str:
    """Read runtime version from installed package metadata."""
    try:
        return version("logprops")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _resolve_version()

__all__ = [
    "LogRecord",
    "LogTransformer",
    "MissingInvocationError",
    "ParseError",
    "ParserRegistry",
    "TransformResult",
    "__version__",
    "build_default_registry",
    "normalize_content",
]
