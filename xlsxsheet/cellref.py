"""Cell references such as ``B7`` and rectangular ranges such as ``A1:C9``."""

from __future__ import annotations

import re
from dataclasses import dataclass

ROW_MAX = 1048576
COLUMN_MAX = 16384
STRING_MAX = 32767

_CELL_PATTERN = re.compile(r"^\$?([A-Z]{1,3})\$?([1-9][0-9]*)$")


def column_to_letters(column: int) -> str:
    """Return the column name for a 1-based column number (1 -> ``A``)."""
    if column < 1:
        raise ValueError(f"column must be 1 or greater, got {column}")
    letters = []
    while column:
        column, remainder = divmod(column - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


def letters_to_column(letters: str) -> int:
    """Return the 1-based column number for a column name such as ``AB``."""
    if not letters or not letters.isascii() or not letters.isalpha() or not letters.isupper():
        raise ValueError(f"invalid column name: {letters!r}")
    column = 0
    for char in letters:
        column = column * 26 + (ord(char) - ord("A") + 1)
    return column


@dataclass(frozen=True)
class CellReference:
    """A single cell position; rows and columns start at 1."""

    row: int = -1
    column: int = -1

    @classmethod
    def from_string(cls, text: str) -> CellReference:
        """Parse ``A1`` or ``$A$1``; an unparsable text gives an invalid reference."""
        match = _CELL_PATTERN.match(text.strip())
        if match is None:
            return cls()
        letters, digits = match.groups()
        return cls(int(digits), letters_to_column(letters))

    def to_string(self, row_abs: bool = False, col_abs: bool = False) -> str:
        """Return the reference text, with ``$`` markers where asked."""
        if not self.is_valid():
            return ""
        col_text = column_to_letters(self.column)
        if col_abs:
            col_text = "$" + col_text
        row_text = str(self.row)
        if row_abs:
            row_text = "$" + row_text
        return col_text + row_text

    def is_valid(self) -> bool:
        return self.row > 0 and self.column > 0

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class CellRange:
    """A rectangle of cells; the default range is invalid."""

    first_row: int = -1
    first_column: int = -1
    last_row: int = -2
    last_column: int = -2

    @classmethod
    def from_string(cls, text: str) -> CellRange:
        """Parse ``A1:C9`` or a single cell ``B2``; bad text gives an invalid range."""
        parts = text.split(":")
        if len(parts) > 2:
            return cls()
        refs = [CellReference.from_string(part) for part in parts]
        if not all(ref.is_valid() for ref in refs):
            return cls()
        start, end = refs[0], refs[-1]
        return cls(start.row, start.column, end.row, end.column)

    def to_string(self, row_abs: bool = False, col_abs: bool = False) -> str:
        if not self.is_valid():
            return ""
        start = self.top_left().to_string(row_abs, col_abs)
        if self.first_row == self.last_row and self.first_column == self.last_column:
            return start
        return f"{start}:{self.bottom_right().to_string(row_abs, col_abs)}"

    def is_valid(self) -> bool:
        return self.first_column <= self.last_column and self.first_row <= self.last_row

    def row_count(self) -> int:
        return self.last_row - self.first_row + 1

    def column_count(self) -> int:
        return self.last_column - self.first_column + 1

    def top_left(self) -> CellReference:
        return CellReference(self.first_row, self.first_column)

    def bottom_right(self) -> CellReference:
        return CellReference(self.last_row, self.last_column)

    def __str__(self) -> str:
        return self.to_string()