"""Transcript inspection CLI.

Usage:
    python -m logprops TRANSCRIPT.jsonl [--config PATH] [--log-level LEVEL]

Reads JSONL log records, pairs every tool invocation with its result and
prints one JSON props object per line.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional, TextIO

from instrukt_ai_logging import get_logger

from logprops.config.loader import load_settings
from logprops.config.schema import ParserSettings
from logprops.core.records import LogRecord
from logprops.logging_config import setup_logging
from logprops.parsers.registry import build_default_registry
from logprops.transformer import LogTransformer

logger = get_logger(__name__)


def iter_records(lines: Iterable[str]) -> Iterator[LogRecord]:
    """Decode JSONL lines into records, skipping blank and malformed lines."""
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Skipping malformed line %d: %s", line_no, e)
            continue
        if not isinstance(raw, dict):
            logger.warning("Skipping line %d: not a JSON object", line_no)
            continue
        yield LogRecord.from_dict(raw)


def run(transcript: Path, settings: Optional[ParserSettings] = None, out: Optional[TextIO] = None) -> int:
    """Transform a transcript and write props as JSONL. Returns the number of props written."""
    out = out or sys.stdout
    transformer = LogTransformer(build_default_registry(settings))
    with open(transcript, "r", encoding="utf-8") as f:
        results = transformer.transform_records(iter_records(f))
    for result in results:
        out.write(json.dumps(result.to_dict(), ensure_ascii=False, default=str))
        out.write("\n")
    return len(results)


def main() -> None:
    parser = argparse.ArgumentParser(description="Normalize agent tool-call logs into props records.")
    parser.add_argument("transcript", type=Path, help="JSONL transcript to read")
    parser.add_argument("--config", type=Path, default=None, help="Settings file (default: $LOGPROPS_CONFIG)")
    parser.add_argument("--log-level", default=None, help="Override LOGPROPS_LOG_LEVEL")
    args = parser.parse_args()

    setup_logging(args.log_level)

    if not args.transcript.exists():
        print(f"Transcript not found: {args.transcript}", file=sys.stderr)
        sys.exit(1)

    count = run(args.transcript, load_settings(args.config))
    logger.info("Wrote %d props records from %s", count, args.transcript)


if __name__ == "__main__":
    main()
