"""Unit tests for line-level edit diffs."""

from logprops.core.diff import DiffLine, diff_lines, split_lines


def _reconstruct(diff: list[DiffLine]) -> tuple[list[str], list[str]]:
    old = [line.content for line in diff if line.type in ("unchanged", "removed")]
    new = [line.content for line in diff if line.type in ("unchanged", "added")]
    return old, new


def test_split_lines_drops_single_trailing_newline() -> None:
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\n\n") == ["a", ""]
    assert split_lines("") == []
    assert split_lines(None) == []


def test_identical_texts_are_all_unchanged() -> None:
    diff = diff_lines("a\nb", "a\nb")

    assert [line.type for line in diff] == ["unchanged", "unchanged"]
    assert [(line.old_line_number, line.new_line_number) for line in diff] == [(1, 1), (2, 2)]


def test_replaced_line_emits_removed_then_added() -> None:
    diff = diff_lines("a\nb\nc", "a\nB\nc")

    assert [(line.type, line.content) for line in diff] == [
        ("unchanged", "a"),
        ("removed", "b"),
        ("added", "B"),
        ("unchanged", "c"),
    ]
    assert diff[1].old_line_number == 2
    assert diff[1].new_line_number is None
    assert diff[2].new_line_number == 2
    assert diff[2].old_line_number is None
    assert diff[3].old_line_number == 3
    assert diff[3].new_line_number == 3


def test_empty_old_text_is_all_added() -> None:
    diff = diff_lines("", "x\ny")

    assert [line.type for line in diff] == ["added", "added"]
    assert [line.new_line_number for line in diff] == [1, 2]


def test_empty_new_text_is_all_removed() -> None:
    diff = diff_lines("x\ny", None)

    assert [line.type for line in diff] == ["removed", "removed"]


def test_line_numbers_diverge_after_insertions() -> None:
    diff = diff_lines("a\nz", "a\nb\nc\nz")

    last = diff[-1]
    assert last.type == "unchanged"
    assert last.content == "z"
    assert last.old_line_number == 2
    assert last.new_line_number == 4


def test_diff_reconstructs_both_sides() -> None:
    old = "def f():\n    return 1\n\nprint(f())"
    new = "def f(x):\n    return x\n\nprint(f(2))\nprint('done')"

    assert _reconstruct(diff_lines(old, new)) == (old.split("\n"), new.split("\n"))


def test_diff_line_serializes_with_camel_case() -> None:
    line = DiffLine(type="removed", content="x", old_line_number=3)

    assert line.to_dict() == {"type": "removed", "content": "x", "oldLineNumber": 3}
