from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from logprops.constants import FRESH_TODO_PREFIXES, GENERIC_TOOL_PREFIXES


class ParserSettings(BaseModel):
    """Tunables shared by every parser and the registry."""

    model_config = ConfigDict(extra="allow", frozen=True)

    # Tool names starting with one of these go to the generic parser (case-sensitive)
    generic_prefixes: List[str] = Field(default_factory=lambda: list(GENERIC_TOOL_PREFIXES))
    # Todo ids starting with one of these count as freshly created
    fresh_todo_prefixes: List[str] = Field(default_factory=lambda: list(FRESH_TODO_PREFIXES))
    # Last-resort regex over todo-write result messages
    legacy_message_counts: bool = True
    # Compute duration between invocation and result timestamps
    preserve_timestamps: bool = True
    # Cap on file content carried by read props; None keeps everything
    max_content_length: Optional[int] = Field(default=None, ge=1)

    @field_validator("generic_prefixes", "fresh_todo_prefixes")
    @classmethod
    def validate_prefixes(cls, v: List[str]) -> List[str]:
        """Reject empty prefixes, which would match every name."""
        for prefix in v:
            if not prefix:
                raise ValueError("Prefixes must be non-empty strings")
        return v
