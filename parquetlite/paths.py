"""Column paths joined with a private delimiter, and row/column tables."""

from __future__ import annotations

from typing import Any, Sequence

__all__ = [
    "PATH_DELIMITER",
    "reform_path_str",
    "path_to_str",
    "str_to_path",
    "path_str_index",
    "is_child_path",
    "new_table",
    "transpose_table",
]

PATH_DELIMITER = "\x01"


def reform_path_str(path_str: str) -> str:
    """Turn a dotted path into one joined with the path delimiter."""
    return path_str.replace(".", PATH_DELIMITER)


def path_to_str(path: Sequence[str]) -> str:
    """Join path components with the path delimiter."""
    return PATH_DELIMITER.join(path)


def str_to_path(text: str) -> list[str]:
    """Split a joined path into its components."""
    return text.split(PATH_DELIMITER)


def path_str_index(text: str) -> int:
    """Return the number of components in a joined path."""
    return len(str_to_path(text))


def is_child_path(parent: str, child: str) -> bool:
    """Return True if ``child`` is ``parent`` or lies beneath it."""
    size = len(parent)
    return child.startswith(parent) and (
        len(child) == size or child[size] == PATH_DELIMITER
    )


def new_table(row_len: int, col_len: int) -> list[list[Any]]:
    """Return ``row_len`` independent rows of ``col_len`` empty cells."""
    return [[None] * col_len for _ in range(row_len)]


def transpose_table(table: Sequence[Sequence[Any]]) -> list[list[Any]]:
    """Swap rows and columns; every row must have the same length."""
    if not table:
        raise ValueError("cannot transpose an empty table")
    return [list(column) for column in zip(*table, strict=True)]