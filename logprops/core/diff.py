"""Line-level diffs for edit props."""

from __future__ import annotations

import difflib
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DiffLineType = Literal["added", "removed", "unchanged"]


class DiffLine(BaseModel):
    """One physical line of an edit script."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: DiffLineType
    content: str
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None

    def to_dict(self) -> dict[str, object]:  # guard: loose-dict - Serialized props
        return self.model_dump(by_alias=True, exclude_none=True)


def split_lines(text: Optional[str]) -> list[str]:
    """Split on newlines, dropping the single empty segment a trailing newline leaves."""
    if not text:
        return []
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def diff_lines(old_text: Optional[str], new_text: Optional[str]) -> list[DiffLine]:
    """Compute a line-level edit script from `old_text` to `new_text`.

    Replaced runs come out as their removed lines followed by their added
    lines. Old and new line numbers count independently from 1.
    """
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

    result: list[DiffLine] = []
    old_no = 1
    new_no = 1
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for line in old_lines[i1:i2]:
                result.append(
                    DiffLine(type="unchanged", content=line, old_line_number=old_no, new_line_number=new_no)
                )
                old_no += 1
                new_no += 1
            continue
        # replace / delete / insert
        for line in old_lines[i1:i2]:
            result.append(DiffLine(type="removed", content=line, old_line_number=old_no))
            old_no += 1
        for line in new_lines[j1:j2]:
            result.append(DiffLine(type="added", content=line, new_line_number=new_no))
            new_no += 1
    return result
