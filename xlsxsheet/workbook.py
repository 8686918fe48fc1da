"""The workbook that owns sheets, shared strings and cell styles."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Union

from .format import Format
from .relationships import Relationships

RichText = list[tuple[str, Format]]
StringItem = Union[str, RichText]


class SheetType(Enum):
    WORK_SHEET = auto()
    CHART_SHEET = auto()
    DIALOG_SHEET = auto()
    MACRO_SHEET = auto()


class SheetState(Enum):
    VISIBLE = auto()
    HIDDEN = auto()
    VERY_HIDDEN = auto()


def _normalise(item: StringItem) -> StringItem:
    """Reduce a rich string without styling to its plain text."""
    if isinstance(item, str):
        return item
    fragments = list(item)
    if len(fragments) == 1 and not fragments[0][1].is_valid():
        return fragments[0][0]
    return fragments


def _string_key(item: StringItem) -> Any:
    if isinstance(item, str):
        return item
    return tuple((text, fmt.key()) for text, fmt in item)


class SharedStrings:
    """The workbook's table of distinct strings, plain or rich."""

    def __init__(self) -> None:
        self._items: list[StringItem] = []
        self._index: dict[Any, int] = {}

    def add(self, text: StringItem) -> int:
        """Add a string unless present and return its index."""
        item = _normalise(text)
        key = _string_key(item)
        index = self._index.get(key)
        if index is None:
            index = len(self._items)
            self._items.append(item)
            self._index[key] = index
        return index

    def index_of(self, text: StringItem) -> int:
        """Return the index of a string; raise ``KeyError`` when it is absent."""
        return self._index[_string_key(_normalise(text))]

    def get(self, index: int) -> StringItem:
        """Return the string at ``index``; raise ``IndexError`` when out of range."""
        if index < 0:
            raise IndexError(index)
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[StringItem]:
        return iter(self._items)


class Styles:
    """Cell formats (xf) and differential formats (dxf) of a workbook."""

    def __init__(self) -> None:
        default = Format()
        default.xf_index = 0
        self._xf: list[Format] = [default]
        self._xf_keys: dict[tuple, int] = {default.key(): 0}
        self._dxf: list[Format] = []
        self._dxf_keys: dict[tuple, int] = {}

    def add_xf_format(self, fmt: Format) -> int:
        """Register a cell format, set its ``xf_index`` and return it."""
        key = fmt.key()
        index = self._xf_keys.get(key)
        if index is None:
            index = len(self._xf)
            stored = fmt.copy()
            stored.xf_index = index
            self._xf.append(stored)
            self._xf_keys[key] = index
        fmt.xf_index = index
        return index

    def xf_format(self, index: int) -> Format:
        """Return a copy of the cell format at ``index``, or an empty format."""
        if 0 <= index < len(self._xf):
            return self._xf[index].copy()
        return Format()

    def add_dxf_format(self, fmt: Format) -> int:
        """Register a differential format, set its ``dxf_index`` and return it."""
        key = fmt.key()
        index = self._dxf_keys.get(key)
        if index is None:
            index = len(self._dxf)
            stored = fmt.copy()
            stored.dxf_index = index
            self._dxf.append(stored)
            self._dxf_keys[key] = index
        fmt.dxf_index = index
        return index


@dataclass
class Workbook:
    """Settings and shared tables that all sheets of a workbook use."""

    shared_strings: SharedStrings = field(default_factory=SharedStrings)
    styles: Styles = field(default_factory=Styles)
    sheets: list[AbstractSheet] = field(default_factory=list)
    drawings: list[Any] = field(default_factory=list)
    date1904: bool = False
    strings_to_numbers_enabled: bool = False
    strings_to_hyperlinks_enabled: bool = True
    html_to_rich_string_enabled: bool = False
    default_date_format: str = "yyyy-mm-dd"
    active_sheet_index: int = 0


class AbstractSheet:
    """Common state of every kind of sheet in a workbook."""

    def __init__(
        self,
        name: str,
        sheet_id: int,
        workbook: Workbook | None = None,
        sheet_type: SheetType = SheetType.WORK_SHEET,
    ) -> None:
        self.name = name
        self.sheet_id = sheet_id
        self.workbook = workbook if workbook is not None else Workbook()
        self.sheet_type = sheet_type
        self.sheet_state = SheetState.VISIBLE
        self.relationships = Relationships()
        self.file_path = ""
        self.drawing: Any = None

    def is_hidden(self) -> bool:
        return self.sheet_state is not SheetState.VISIBLE

    def is_visible(self) -> bool:
        return not self.is_hidden()

    def set_hidden(self, hidden: bool) -> None:
        """Hide or show the sheet; a sheet already hidden keeps its state."""
        if hidden == self.is_hidden():
            return
        self.sheet_state = SheetState.HIDDEN if hidden else SheetState.VISIBLE

    def set_visible(self, visible: bool) -> None:
        self.set_hidden(not visible)