"""Unit tests for file type inference."""

import pytest

from logprops.core.file_types import infer_file_type


@pytest.mark.parametrize(
    "path, expected",
    [
        ("src/app.ts", "typescript"),
        ("component.TSX", "typescriptreact"),
        ("/home/u/script.py", "python"),
        ("config.yml", "yaml"),
        ("run.sh", "bash"),
        ("archive.tar.gz", "plaintext"),
        ("Makefile", "plaintext"),
        ("", "plaintext"),
        (None, "plaintext"),
    ],
)
def test_infer_file_type(path, expected: str) -> None:
    assert infer_file_type(path) == expected
