"""Content search parser.

Search output is grouped per file. Three text layouts are understood,
matching the search tool's output modes: `path:line:content` (content),
`path:count` (count) and bare paths (files_with_matches).
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
    as_bool,
    as_list,
    as_str,
    extract_error_message,
    first_decoded,
    pick_str,
)
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import GrepToolProps, GrepUi, SearchMatch, SearchResult

_CONTENT_LINE = re.compile(r"^(?P<path>.+?):(?P<line>\d+):(?P<content>.*)$")
_COUNT_LINE = re.compile(r"^(?P<path>.+?):(?P<count>\d+)$")
_HEADER_LINE = re.compile(r"^(found \d+ (files?|matches?)|no files found|no matches found)", re.IGNORECASE)
_REGEX_SYNTAX = re.compile(r"[.^$*+?{}\[\]|()\\]")


@dataclass(frozen=True)
class _FileHits:
    matches: list[SearchMatch]
    count: int = 0


def _locate(pattern: Optional[re.Pattern[str]], line: str) -> tuple[int, int]:
    if pattern is not None:
        found = pattern.search(line)
        if found is not None:
            return found.start(), found.end()
    return 0, len(line)


def compile_pattern(pattern: str, case_sensitive: bool) -> Optional[re.Pattern[str]]:
    """Compile a literal search pattern for match offsets.

    Patterns using regex syntax yield None so matches span the whole line.
    Only the escaped literal reaches the regex engine, so it cannot backtrack.
    """
    if not pattern or _REGEX_SYNTAX.search(pattern):
        return None
    return re.compile(re.escape(pattern), 0 if case_sensitive else re.IGNORECASE)


def parse_search_output(text: str, pattern: Optional[re.Pattern[str]] = None) -> list[SearchResult]:
    """Group search output lines into per-file results, in first-seen order."""
    groups: dict[str, _FileHits] = {}
    for raw_line in text.split("\n"):
        line = raw_line.rstrip()
        if not line.strip() or _HEADER_LINE.match(line.strip()):
            continue
        content_match = _CONTENT_LINE.match(line)
        if content_match is not None:
            path = content_match.group("path")
            content = content_match.group("content")
            start, end = _locate(pattern, content)
            hits = groups.setdefault(path, _FileHits(matches=[]))
            hits.matches.append(
                SearchMatch(
                    line_number=int(content_match.group("line")),
                    line_content=content,
                    match_start=start,
                    match_end=end,
                )
            )
            continue
        count_match = _COUNT_LINE.match(line)
        if count_match is not None:
            groups[count_match.group("path")] = _FileHits(matches=[], count=int(count_match.group("count")))
            continue
        groups.setdefault(line.strip(), _FileHits(matches=[]))

    return [
        SearchResult(file_path=path, matches=hits.matches, match_count=len(hits.matches) or hits.count)
        for path, hits in groups.items()
    ]


def _from_mapping(data: Optional[Mapping[str, object]], pattern: Optional[re.Pattern[str]]) -> Optional[list[SearchResult]]:
    if data is None:
        return None
    content = pick_str(data, "content")
    if content:
        return parse_search_output(content, pattern)
    filenames = as_list(data.get("filenames"))
    if filenames is None:
        return None
    return [SearchResult(file_path=name) for name in filenames if isinstance(name, str) and name]


class GrepToolParser(ToolParser[GrepToolProps]):
    """Regex content search results grouped per file."""

    tool_name = TOOL_NAMES["grep"][0]
    aliases = TOOL_NAMES["grep"][1:]
    tool_type = "search"
    supported_features = (
        *BASE_FEATURES,
        "structured-results",
        "file-grouping",
        "match-counting",
        "pattern-options",
    )

    @staticmethod
    def _decoders(pattern: Optional[re.Pattern[str]]) -> tuple[Decoder[list[SearchResult]], ...]:
        def structured(ctx: DecodeContext) -> Optional[list[SearchResult]]:
            return _from_mapping(ctx.structured, pattern)

        def side_channel(ctx: DecodeContext) -> Optional[list[SearchResult]]:
            return _from_mapping(ctx.side_mapping, pattern)

        def text(ctx: DecodeContext) -> Optional[list[SearchResult]]:
            return parse_search_output(ctx.text, pattern) if ctx.text is not None else None

        return (structured, side_channel, text)

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> GrepToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        pattern = as_str(params.get("pattern")) or ""
        include = as_str(params.get("include")) or as_str(params.get("glob")) or ""
        flags = as_str(params.get("flags")) or ""
        case_insensitive = as_bool(params.get("-i")) or "i" in flags
        fields = {
            **correlation.base_fields(),
            "pattern": pattern,
            "search_path": as_str(params.get("path")),
            "file_patterns": [part.strip() for part in include.split(",") if part.strip()],
            "case_sensitive": not case_insensitive,
            "output_mode": as_str(params.get("output_mode")),
        }
        if correlation.pending:
            return GrepToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        if ctx.is_error:
            return GrepToolProps(
                **fields,
                status=self.status_for(correlation),
                error_message=extract_error_message(ctx, "Search failed"),
            )

        compiled = compile_pattern(pattern, not case_insensitive)
        results = first_decoded(self._decoders(compiled), ctx, [])
        return GrepToolProps(
            **fields,
            status=self.status_for(correlation),
            results=results,
            ui=GrepUi(
                total_matches=sum(item.match_count for item in results),
                files_with_matches=len(results),
            ),
        )
