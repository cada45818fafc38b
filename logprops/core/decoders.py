"""Ordered decoder attempts and loose field coercion.

Tool results reach us in several encodings: a structured object, the same
object as a JSON string (multi edit, todo write and generic tools), a
side-channel copy attached to the record, or a human-readable string. Each
parser lists its decoders in priority order and `first_decoded` returns the
first one that recognises the shape.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional, TypeVar, cast

from logprops.core.output_shape import decode_output

T = TypeVar("T")


@dataclass(frozen=True)
class DecodeContext:
    """Everything a decoder may look at.

    String output is kept verbatim by `structured` and `text`. Only units
    whose results arrive as JSON-encoded objects read `json_structured`.
    """

    output: object
    is_error: bool = False
    side_channel: object = None
    input: dict[str, object] = field(default_factory=dict)  # guard: loose-dict - External tool input

    @property
    def structured(self) -> Optional[Mapping[str, object]]:
        """The result output when it already is a mapping."""
        return as_mapping(self.output)

    @property
    def json_structured(self) -> Optional[Mapping[str, object]]:
        """The result output as a mapping, decoding a JSON object string."""
        return as_json_mapping(self.output)

    @property
    def side_mapping(self) -> Optional[Mapping[str, object]]:
        return as_mapping(self.side_channel)

    @property
    def text(self) -> Optional[str]:
        return self.output if isinstance(self.output, str) else None

    @property
    def plain_text(self) -> Optional[str]:
        """The result output when it is a string that is not a JSON object."""
        if self.text is not None and self.json_structured is None:
            return self.text
        return None


Decoder = Callable[[DecodeContext], Optional[T]]


def first_decoded(decoders: Sequence[Callable[[DecodeContext], Optional[T]]], ctx: DecodeContext, default: T) -> T:
    """Run decoders in order and return the first non-None value."""
    for decoder in decoders:
        value = decoder(ctx)
        if value is not None:
            return value
    return default


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def as_mapping(value: object) -> Optional[Mapping[str, object]]:
    return cast(Mapping[str, object], value) if isinstance(value, Mapping) else None


def as_json_mapping(value: object) -> Optional[Mapping[str, object]]:
    """Mapping view of `value`; JSON object strings are decoded."""
    return as_mapping(decode_output(value))


def as_str(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


def as_int(value: object) -> Optional[int]:
    # bool is an int subclass but never a count
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def as_bool(value: object) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def as_list(value: object) -> Optional[list[object]]:
    return cast(list[object], value) if isinstance(value, list) else None


def pick(data: Optional[Mapping[str, object]], *keys: str) -> object:
    """First present, non-None value among `keys`."""
    if data is None:
        return None
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def pick_str(data: Optional[Mapping[str, object]], *keys: str) -> Optional[str]:
    if data is None:
        return None
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return None


def pick_int(data: Optional[Mapping[str, object]], *keys: str) -> Optional[int]:
    if data is None:
        return None
    for key in keys:
        value = as_int(data.get(key))
        if value is not None:
            return value
    return None


def has_any(data: Optional[Mapping[str, object]], *keys: str) -> bool:
    return data is not None and any(data.get(key) is not None for key in keys)


def is_interrupted_output(ctx: DecodeContext) -> bool:
    """True when the structured output or the side channel reports an interruption."""
    for data in (ctx.json_structured, ctx.side_mapping):
        if data is not None and data.get("interrupted") is True:
            return True
    return False


# ---------------------------------------------------------------------------
# Error messages
# ---------------------------------------------------------------------------

_ERROR_KEYS = ("error", "message", "stderr")


def _structured_error(ctx: DecodeContext) -> Optional[str]:
    return pick_str(ctx.json_structured, *_ERROR_KEYS) or None


def _side_channel_error(ctx: DecodeContext) -> Optional[str]:
    if isinstance(ctx.side_channel, str) and ctx.side_channel.strip():
        return ctx.side_channel
    return pick_str(ctx.side_mapping, *_ERROR_KEYS) or None


def _text_error(ctx: DecodeContext) -> Optional[str]:
    if ctx.text and ctx.text.strip():
        return ctx.text
    return None


ERROR_DECODERS: tuple[Decoder[str], ...] = (_structured_error, _side_channel_error, _text_error)


def extract_error_message(ctx: DecodeContext, default: str) -> str:
    """Best-effort human-readable error message."""
    return first_decoded(ERROR_DECODERS, ctx, default)
