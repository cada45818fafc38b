"""Tool parser registry.

The registry is the single entry point for callers: it resolves a record to
the parser that owns its tool name and converts every parser exception into
`None` plus a logged diagnostic.
"""

from __future__ import annotations

from typing import Optional

from instrukt_ai_logging import get_logger

from logprops.config.schema import ParserSettings
from logprops.constants import ASSISTANT_ROLE
from logprops.core.records import LogRecord
from logprops.parsers.base import ParserMetadata, ToolParser
from logprops.parsers.bash import BashToolParser
from logprops.parsers.edit import EditToolParser
from logprops.parsers.generic import GenericToolParser
from logprops.parsers.glob import GlobToolParser
from logprops.parsers.grep import GrepToolParser
from logprops.parsers.ls import LsToolParser
from logprops.parsers.multi_edit import MultiEditToolParser
from logprops.parsers.read import ReadToolParser
from logprops.parsers.todo_read import TodoReadToolParser
from logprops.parsers.todo_write import TodoWriteToolParser
from logprops.parsers.write import WriteToolParser
from logprops.types.props import BaseProps

logger = get_logger(__name__)

AnyParser = ToolParser[BaseProps]


def invocation_name(record: LogRecord) -> Optional[str]:
    """Name of the first invocation block of an assistant record."""
    if record.role != ASSISTANT_ROLE:
        return None
    for block in record.blocks:
        if block.kind == "tool-invocation":
            return block.name
    return None


class ParserRegistry:
    """Name -> parser map plus reserved-prefix routing to a generic parser."""

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()
        self._parsers: dict[str, AnyParser] = {}
        self._generic: Optional[AnyParser] = None

    def register(self, name: str, parser: AnyParser) -> None:
        """Register `parser` under `name`. Re-registering a name replaces it."""
        if name in self._parsers:
            logger.warning("Replacing parser registered as %s", name)
        self._parsers[name] = parser

    def register_generic(self, parser: AnyParser) -> None:
        """Set the parser that owns reserved-prefix tool names."""
        self._generic = parser

    def get(self, name: str) -> Optional[AnyParser]:
        """Look up by registered name, then by any tool name or alias."""
        parser = self._parsers.get(name)
        if parser is not None:
            return parser
        if self._has_reserved_prefix(name):
            return self._generic
        for candidate in self._parsers.values():
            if candidate.accepts_name(name):
                return candidate
        return None

    def _has_reserved_prefix(self, name: str) -> bool:
        return name.startswith(tuple(self.settings.generic_prefixes))

    def resolve(self, record: LogRecord) -> Optional[AnyParser]:
        """Find the parser for `record`, or None."""
        name = invocation_name(record)
        if name is None:
            return None

        if self._has_reserved_prefix(name):
            if self._generic is not None and self._generic.can_parse(record):
                return self._generic
            return None

        for parser in self._parsers.values():
            if parser.can_parse(record):
                return parser
        return None

    def can_parse(self, record: LogRecord) -> bool:
        return self.resolve(record) is not None

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> Optional[BaseProps]:
        """Parse a record pair into props. Never raises; None when nothing applies."""
        parser = self.resolve(call)
        if parser is None:
            logger.debug("No parser for record %s (tool=%s)", call.id, invocation_name(call))
            return None
        try:
            return parser.parse(call, result)
        except Exception as e:
            logger.error(
                "Parser %s failed on record %s: %s",
                parser.tool_name,
                call.id,
                e,
                exc_info=True,
            )
            return None

    def list_registered(self) -> list[str]:
        names = list(self._parsers)
        if self._generic is not None:
            names.append(self._generic.tool_name)
        return names

    def list_metadata(self) -> list[ParserMetadata]:
        parsers = list(self._parsers.values())
        if self._generic is not None:
            parsers.append(self._generic)
        return [parser.metadata() for parser in parsers]


def build_default_registry(settings: Optional[ParserSettings] = None) -> ParserRegistry:
    """Fresh registry holding every built-in parser."""
    settings = settings or ParserSettings()
    registry = ParserRegistry(settings)
    parsers: list[AnyParser] = [
        BashToolParser(settings),
        EditToolParser(settings),
        MultiEditToolParser(settings),
        ReadToolParser(settings),
        WriteToolParser(settings),
        GlobToolParser(settings),
        LsToolParser(settings),
        TodoReadToolParser(settings),
        TodoWriteToolParser(settings),
        GrepToolParser(settings),
    ]
    for parser in parsers:
        registry.register(parser.tool_name, parser)
    registry.register_generic(GenericToolParser(settings))
    return registry
