"""Cells, their formulas and their positions."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from .cellref import CellRange
from .dates import parse_xsd_boolean
from .format import Format


class CellType(Enum):
    BOOLEAN = auto()
    DATE = auto()
    ERROR = auto()
    INLINE_STRING = auto()
    NUMBER = auto()
    SHARED_STRING = auto()
    STRING = auto()
    CUSTOM = auto()


class FormulaType(Enum):
    NORMAL = auto()
    ARRAY = auto()
    DATA_TABLE = auto()
    SHARED = auto()


_TYPE_NAMES = {
    FormulaType.ARRAY: "array",
    FormulaType.DATA_TABLE: "dataTable",
    FormulaType.SHARED: "shared",
}
_TYPES_BY_NAME = {name: kind for kind, name in _TYPE_NAMES.items()}
_RANGED_TYPES = (FormulaType.SHARED, FormulaType.ARRAY, FormulaType.DATA_TABLE)
_STRING_TYPES = (CellType.SHARED_STRING, CellType.INLINE_STRING, CellType.STRING)


@dataclass
class CellFormula:
    """A formula; a leading ``=`` or ``{=...}`` wrapper is removed from the text."""

    text: str = ""
    formula_type: FormulaType = FormulaType.NORMAL
    reference: CellRange = field(default_factory=CellRange)
    calculate: bool = False
    shared_index: int = 0

    def __post_init__(self) -> None:
        if self.text.startswith("="):
            self.text = self.text[1:]
        elif self.text.startswith("{=") and self.text.endswith("}"):
            self.text = self.text[2:-1]

    def is_valid(self) -> bool:
        """True for a formula with text, or for a member of a shared group."""
        return bool(self.text) or self.formula_type is FormulaType.SHARED

    def to_element(self) -> ET.Element:
        """Return the ``<f>`` element for this formula."""
        element = ET.Element("f")
        type_name = _TYPE_NAMES.get(self.formula_type)
        if type_name:
            element.set("t", type_name)
        if self.formula_type in _RANGED_TYPES and self.reference.is_valid():
            element.set("ref", self.reference.to_string())
        if self.calculate:
            element.set("ca", "1")
        if self.formula_type is FormulaType.SHARED:
            element.set("si", str(self.shared_index))
        if self.text:
            element.text = self.text
        return element

    @classmethod
    def from_element(cls, element: ET.Element) -> CellFormula:
        """Read a formula from an ``<f>`` element."""
        formula = cls(
            text=element.text or "",
            formula_type=_TYPES_BY_NAME.get(element.get("t", ""), FormulaType.NORMAL),
        )
        if "ref" in element.attrib:
            formula.reference = CellRange.from_string(element.get("ref", ""))
        if "ca" in element.attrib:
            formula.calculate = parse_xsd_boolean(element.get("ca", ""))
        if "si" in element.attrib:
            formula.shared_index = int(element.get("si", "0"))
        return formula


def _as_number(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass
class Cell:
    """The content of one cell.

    ``rich_string`` holds ``(text, Format)`` fragments when the text is styled.
    A number cell whose value is ``None`` is blank.
    """

    value: Any = None
    cell_type: CellType = CellType.NUMBER
    format: Format = field(default_factory=Format)
    parent: Any = field(default=None, repr=False, compare=False)
    style_number: int = -1
    formula: CellFormula | None = None
    rich_string: list[tuple[str, Format]] | None = None

    def has_formula(self) -> bool:
        return self.formula is not None and self.formula.is_valid()

    def is_rich_string(self) -> bool:
        if self.cell_type not in _STRING_TYPES or not self.rich_string:
            return False
        if len(self.rich_string) > 1:
            return True
        return self.rich_string[0][1].is_valid()

    def is_date_time(self) -> bool:
        """True for a non-negative number shown with a date or time format."""
        if self.cell_type not in (CellType.NUMBER, CellType.DATE, CellType.CUSTOM):
            return False
        return (
            _as_number(self.value) >= 0
            and self.format.is_valid()
            and self.format.is_date_time_format()
        )


@dataclass
class CellLocation:
    """A cell together with its row and column."""

    row: int = -1
    column: int = -1
    cell: Cell | None = None