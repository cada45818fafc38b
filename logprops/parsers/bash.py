"""Command execution parser."""

from dataclasses import dataclass
from typing import Optional

from logprops.constants import TOOL_NAMES
from logprops.core.decoders import (
    DecodeContext,
    Decoder,
    as_int,
    as_mapping,
    as_str,
    first_decoded,
    has_any,
    pick_int,
    pick_str,
)
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import BashToolProps

_OUTPUT_KEYS = ("stdout", "stderr", "exit_code", "exitCode", "interrupted")


@dataclass(frozen=True)
class CommandOutcome:
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    interrupted: bool = False


def _from_mapping(ctx: DecodeContext, data: object) -> Optional[CommandOutcome]:
    mapping = as_mapping(data)
    if mapping is None or not has_any(mapping, *_OUTPUT_KEYS):
        return None
    exit_code = pick_int(mapping, "exit_code", "exitCode")
    return CommandOutcome(
        stdout=pick_str(mapping, "stdout") or "",
        stderr=pick_str(mapping, "stderr") or "",
        exit_code=exit_code if exit_code is not None else (1 if ctx.is_error else 0),
        interrupted=mapping.get("interrupted") is True,
    )


def _structured(ctx: DecodeContext) -> Optional[CommandOutcome]:
    return _from_mapping(ctx, ctx.output)


def _side_channel(ctx: DecodeContext) -> Optional[CommandOutcome]:
    return _from_mapping(ctx, ctx.side_channel)


def _plain_text(ctx: DecodeContext) -> Optional[CommandOutcome]:
    text = as_str(ctx.output)
    if text is None:
        return None
    if ctx.is_error:
        return CommandOutcome(stderr=text, exit_code=1)
    return CommandOutcome(stdout=text, exit_code=0)


DECODERS: tuple[Decoder[CommandOutcome], ...] = (_structured, _side_channel, _plain_text)


class BashToolParser(ToolParser[BashToolProps]):
    """Shell command invocations and their stdout/stderr/exit code."""

    tool_name = TOOL_NAMES["bash"][0]
    aliases = TOOL_NAMES["bash"][1:]
    tool_type = "command"
    supported_features = (*BASE_FEATURES, "exit-code", "interrupted-support", "working-directory")

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> BashToolProps:
        correlation = self.correlate(call, result)
        params = correlation.invocation.input
        fields = {
            **correlation.base_fields(),
            "command": as_str(params.get("command")) or "",
            "description": as_str(params.get("description")),
            "timeout": as_int(params.get("timeout")),
            "working_directory": as_str(params.get("workingDirectory")) or as_str(params.get("cwd")),
        }
        if correlation.pending:
            return BashToolProps(**fields, status=self.status_for(correlation))

        ctx = self.decode_context(correlation)
        fallback = CommandOutcome(exit_code=1) if ctx.is_error else CommandOutcome(exit_code=0)
        outcome = first_decoded(DECODERS, ctx, fallback)

        output = outcome.stdout
        if outcome.stderr:
            output = f"{output}\n{outcome.stderr}" if output else outcome.stderr
        failed = ctx.is_error or (outcome.exit_code is not None and outcome.exit_code != 0)

        return BashToolProps(
            **fields,
            status=self.status_for(correlation, interrupted=outcome.interrupted, failed=failed),
            output=output,
            error_output=outcome.stderr,
            exit_code=outcome.exit_code,
            interrupted=outcome.interrupted,
        )
