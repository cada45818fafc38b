"""Generic parser for dynamically named external tool integrations.

Any invocation whose name starts with a reserved prefix lands here. Names
follow `prefix__server__method` or the single-underscore `mcp_server_method`
form. Method parts after the server are rejoined with a single `_`, so
`mcp__srv__get__item` has method `get_item`.
"""

from typing import Any, Optional

from logprops.core.correlation import Correlation
from logprops.core.decoders import extract_error_message, is_interrupted_output
from logprops.core.output_shape import analyze_output, decode_output
from logprops.core.records import LogRecord
from logprops.parsers.base import BASE_FEATURES, ToolParser
from logprops.types.props import GenericToolProps, GenericUi

UNKNOWN_SERVER = "unknown"


def split_tool_name(tool_name: str) -> tuple[str, str]:
    """Return (server, method) for a reserved-prefix tool name.

    `generic-integration__serverX__methodY` -> ("serverX", "methodY").
    Two-part names keep the whole name as the method.
    """
    parts = tool_name.split("__")
    if len(parts) >= 3:
        return parts[1], "_".join(parts[2:])
    if len(parts) == 2:
        return parts[1] or UNKNOWN_SERVER, tool_name

    underscore_parts = tool_name.split("_")
    if len(underscore_parts) >= 3:
        return underscore_parts[1], "_".join(underscore_parts[2:])
    return UNKNOWN_SERVER, tool_name


class GenericToolParser(ToolParser[GenericToolProps]):
    """Catch-all for reserved-prefix tool names."""

    tool_name = "generic"
    tool_type = "external"
    supported_features = (*BASE_FEATURES, "output-shape-analysis", "dynamic-tool-names", "interrupted-support")

    @property
    def prefixes(self) -> tuple[str, ...]:
        return tuple(self.settings.generic_prefixes)

    def accepts_name(self, name: str) -> bool:
        """Reserved-prefix match; case-sensitive."""
        return bool(name) and name.startswith(self.prefixes)

    def _output(self, correlation: Correlation) -> Any:
        output = decode_output(correlation.output)
        if output is None and correlation.side_channel is not None:
            output = decode_output(correlation.side_channel)
        return output

    def parse(self, call: LogRecord, result: Optional[LogRecord] = None) -> GenericToolProps:
        correlation = self.correlate(call, result)
        invocation = correlation.invocation
        server_name, method_name = split_tool_name(invocation.name)

        output: Any = None
        error_message = None
        interrupted = False
        if not correlation.pending:
            ctx = self.decode_context(correlation)
            decoded = self._output(correlation)
            if ctx.is_error:
                # Structured error payloads are kept next to the message
                output = decoded if isinstance(decoded, (dict, list)) else None
                error_message = extract_error_message(ctx, f"{invocation.name} failed")
            else:
                output = decoded
                interrupted = is_interrupted_output(ctx)

        shape = analyze_output(output)
        return GenericToolProps(
            **correlation.base_fields(),
            status=self.status_for(correlation, interrupted=interrupted),
            tool_name=invocation.name,
            server_name=server_name,
            method_name=method_name,
            parameters=dict(invocation.input),
            output=output,
            error_message=error_message,
            ui=GenericUi(
                display_mode=shape.display_mode,
                is_structured=shape.is_structured,
                has_nested_data=shape.has_nested_data,
                key_count=shape.key_count,
                is_complex=shape.is_complex,
                is_large=shape.is_large,
                show_raw_json=shape.is_complex,
                collapsible=shape.is_large,
            ),
        )
