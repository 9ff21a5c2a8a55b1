"""A1 address helpers shared by the sheet and the calc engine."""

from __future__ import annotations

import re

_A1_RE = re.compile(r"^([A-Z]+)(\d+)$")


def column_letter(index: int) -> str:
    """Convert a 1-based column index to letters (1 -> A, 27 -> AA)."""
    if index < 1:
        raise ValueError(f"Invalid column index: {index}")
    letters = ""
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def column_index(letters: str) -> int:
    """Convert column letters to a 1-based index (A -> 1, AA -> 27)."""
    if not letters or not letters.isalpha() or not letters.isupper():
        raise ValueError(f"Invalid column letters: {letters!r}")
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - 64)
    return index


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """Parse ``"B3"`` into 1-based ``(row, col)``. Leading zeros are accepted."""
    m = _A1_RE.match(ref.strip())
    if not m:
        raise ValueError(f"Invalid cell reference: {ref!r}")
    row = int(m.group(2))
    if row < 1:
        raise ValueError(f"Invalid cell reference: {ref!r}")
    return row, column_index(m.group(1))


def rowcol_to_a1(row: int, col: int) -> str:
    """Build the canonical address for 1-based ``(row, col)``."""
    if row < 1:
        raise ValueError(f"Invalid row: {row}")
    return f"{column_letter(col)}{row}"

