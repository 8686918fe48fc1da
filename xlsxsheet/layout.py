"""Column and row layout: widths, heights, hiding and outline grouping."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from .cellref import COLUMN_MAX
from .format import Format

_MAX_DIGIT_WIDTH = 7.0  # pixels of a digit in the default 11pt font
_PADDING = 5.0
_DEFAULT_COLUMN_PIXELS = 64
_DEFAULT_ROW_HEIGHT = 15.0


@dataclass
class ColumnInfo:
    """Settings shared by the columns ``first_column`` to ``last_column``."""

    first_column: int
    last_column: int
    is_set_width: bool = False
    width: float = 0.0
    custom_width: bool = False
    format: Format = field(default_factory=Format)
    hidden: bool = False
    outline_level: int = 0
    collapsed: bool = False


@dataclass
class RowInfo:
    """Settings of a single row."""

    height: float = 0.0
    custom_height: bool = False
    format: Format = field(default_factory=Format)
    hidden: bool = False
    outline_level: int = 0
    collapsed: bool = False


@dataclass
class SheetFormatProps:
    """Sheet-wide defaults for column widths and row heights."""

    base_col_width: int = 8
    custom_height: bool = False
    default_col_width: float = 8.43
    default_row_height: float = _DEFAULT_ROW_HEIGHT
    outline_level_col: int = 0
    outline_level_row: int = 0
    thick_bottom: bool = False
    thick_top: bool = False
    zero_height: bool = False


def calculate_col_width(characters: int) -> float:
    """Return the default column width for a base width in characters."""
    return float(characters)


def row_pixels_size(height: float | None) -> int:
    """Convert a row height in points to pixels; ``None`` means the default height."""
    if height is None:
        height = _DEFAULT_ROW_HEIGHT
    return int(4.0 / 3.0 * height)


def col_pixels_size(width: float | None) -> int:
    """Convert a column width in characters to pixels; ``None`` means the default."""
    if width is None:
        return _DEFAULT_COLUMN_PIXELS
    if width < 1:
        return int(width * (_MAX_DIGIT_WIDTH + _PADDING) + 0.5)
    return int(width * _MAX_DIGIT_WIDTH + 0.5) + int(_PADDING)


class ColumnLayout:
    """Non-overlapping column settings, keyed by their first column.

    Iterating yields the ``ColumnInfo`` entries in column order.
    """

    def __init__(self, infos: Iterable[ColumnInfo] = ()) -> None:
        self._infos: dict[int, ColumnInfo] = {}
        self._by_column: dict[int, ColumnInfo] = {}
        for info in infos:
            self._store(info)

    def _store(self, info: ColumnInfo) -> None:
        self._infos[info.first_column] = info
        for column in range(info.first_column, info.last_column + 1):
            self._by_column[column] = info

    def _ordered(self) -> list[ColumnInfo]:
        return [self._infos[key] for key in sorted(self._infos)]

    def __iter__(self) -> Iterator[ColumnInfo]:
        return iter(self._ordered())

    def __len__(self) -> int:
        return len(self._infos)

    def split(self, col_first: int, col_last: int) -> None:
        """Split existing entries so that none crosses ``col_first`` or ``col_last``.

        With ``A:H`` set, splitting for ``B:D`` leaves ``A``, ``B:H``, and then
        ``A``, ``B:D``, ``E:H``.
        """
        for info in self._ordered():
            if info.first_column < col_first <= info.last_column:
                tail = replace(info, first_column=col_first)
                info.last_column = col_first - 1
                self._store(tail)
                break
        for info in self._ordered():
            if info.first_column <= col_last < info.last_column:
                tail = replace(info, first_column=col_last + 1)
                info.last_column = col_last
                self._store(tail)
                break

    def column_indexes(self, col_first: int, col_last: int) -> list[int]:
        """Split at the range edges and return the first column of each piece."""
        self.split(col_first, col_last)
        nodes = [col_first]
        for column in range(col_first, col_last + 1):
            info = self._infos.get(column)
            if info is None:
                continue
            if nodes[-1] != column:
                nodes.append(column)
            next_column = info.last_column + 1
            if next_column <= col_last:
                nodes.append(next_column)
        return nodes

    def _pieces(self, col_first: int, col_last: int) -> Iterator[tuple[int, int, ColumnInfo | None]]:
        nodes = self.column_indexes(col_first, col_last)
        ends = [node - 1 for node in nodes[1:]] + [col_last]
        for start, end in zip(nodes, ends):
            yield start, end, self._infos.get(start)

    def infos_for(self, col_first: int, col_last: int) -> list[ColumnInfo]:
        """Return entries covering exactly ``col_first..col_last``, creating gaps' entries.

        An invalid range gives an empty list.
        """
        if col_first > col_last or col_first < 1 or col_last > COLUMN_MAX:
            return []
        result = []
        for start, end, info in self._pieces(col_first, col_last):
            if info is None:
                info = ColumnInfo(start, end)
                self._store(info)
            result.append(info)
        return result

    def info_at(self, column: int) -> ColumnInfo | None:
        """Return the entry that covers ``column``, if any."""
        return self._by_column.get(column)

    def group(self, col_first: int, col_last: int, collapsed: bool = True) -> None:
        """Raise the outline level of the columns; collapsing hides them."""
        for start, end, info in self._pieces(col_first, col_last):
            if info is None:
                info = ColumnInfo(start, end)
                self._store(info)
            info.outline_level += 1
            if collapsed:
                info.hidden = True
        if collapsed:
            column = col_last + 1
            self.split(column, column)
            info = self._infos.get(column)
            if info is None:
                self._store(ColumnInfo(column, column, collapsed=True))
            else:
                info.collapsed = True