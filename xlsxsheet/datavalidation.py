"""Data validation rules attached to ranges of cells."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from .cellref import CellRange, CellReference
from .dates import parse_xsd_boolean


class ValidationType(Enum):
    NONE = "none"
    WHOLE = "whole"
    DECIMAL = "decimal"
    LIST = "list"
    DATE = "date"
    TIME = "time"
    TEXT_LENGTH = "textLength"
    CUSTOM = "custom"


class ValidationOperator(Enum):
    BETWEEN = "between"
    NOT_BETWEEN = "notBetween"
    EQUAL = "equal"
    NOT_EQUAL = "notEqual"
    LESS_THAN = "lessThan"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"


class ErrorStyle(Enum):
    STOP = "stop"
    WARNING = "warning"
    INFORMATION = "information"


_E = TypeVar("_E", bound=Enum)


def _lookup(kind: type[_E], text: str | None, default: _E) -> _E:
    try:
        return kind(text)
    except ValueError:
        return default


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


@dataclass
class DataValidation:
    """A validation rule together with the cell ranges it applies to."""

    validation_type: ValidationType = ValidationType.NONE
    validation_operator: ValidationOperator = ValidationOperator.BETWEEN
    formula1: str = ""
    formula2: str = ""
    allow_blank: bool = False
    error_style: ErrorStyle = ErrorStyle.STOP
    prompt_message_visible: bool = True
    error_message_visible: bool = True
    error_message: str = ""
    error_message_title: str = ""
    prompt_message: str = ""
    prompt_message_title: str = ""
    ranges: list[CellRange] = field(default_factory=list)

    def add_cell(self, row: int | CellReference, column: int | None = None) -> None:
        """Add one cell, given as a reference or as row and column."""
        if isinstance(row, CellReference):
            row, column = row.row, row.column
        if column is None:
            raise TypeError("a column is required when the row is a number")
        self.ranges.append(CellRange(row, column, row, column))

    def add_range(self, cell_range: CellRange | str) -> None:
        """Add a range, given as a ``CellRange`` or as text such as ``A1:B4``."""
        if isinstance(cell_range, str):
            cell_range = CellRange.from_string(cell_range)
        self.ranges.append(cell_range)

    def set_error_message(self, message: str, title: str = "") -> None:
        self.error_message = message
        self.error_message_title = title

    def set_prompt_message(self, message: str, title: str = "") -> None:
        self.prompt_message = message
        self.prompt_message_title = title

    def to_element(self) -> ET.Element:
        """Return the ``<dataValidation>`` element for this rule."""
        element = ET.Element("dataValidation")
        if self.validation_type is not ValidationType.NONE:
            element.set("type", self.validation_type.value)
        if self.error_style is not ErrorStyle.STOP:
            element.set("errorStyle", self.error_style.value)
        if self.validation_operator is not ValidationOperator.BETWEEN:
            element.set("operator", self.validation_operator.value)
        if self.allow_blank:
            element.set("allowBlank", "1")
        if self.prompt_message_visible:
            element.set("showInputMessage", "1")
        if self.error_message_visible:
            element.set("showErrorMessage", "1")
        if self.error_message_title:
            element.set("errorTitle", self.error_message_title)
        if self.error_message:
            element.set("error", self.error_message)
        if self.prompt_message_title:
            element.set("promptTitle", self.prompt_message_title)
        if self.prompt_message:
            element.set("prompt", self.prompt_message)
        element.set("sqref", " ".join(r.to_string() for r in self.ranges))
        if self.formula1:
            ET.SubElement(element, "formula1").text = self.formula1
        if self.formula2:
            ET.SubElement(element, "formula2").text = self.formula2
        return element

    @classmethod
    def from_element(cls, element: ET.Element) -> DataValidation:
        """Read a rule from a ``<dataValidation>`` element."""
        attrs = element.attrib
        validation = cls(
            validation_type=_lookup(ValidationType, attrs.get("type"), ValidationType.NONE),
            validation_operator=_lookup(
                ValidationOperator, attrs.get("operator"), ValidationOperator.BETWEEN
            ),
            error_style=_lookup(ErrorStyle, attrs.get("errorStyle"), ErrorStyle.STOP),
            allow_blank=parse_xsd_boolean(attrs.get("allowBlank", "")),
            prompt_message_visible=parse_xsd_boolean(attrs.get("showInputMessage", "")),
            error_message_visible=parse_xsd_boolean(attrs.get("showErrorMessage", "")),
            error_message=attrs.get("error", ""),
            error_message_title=attrs.get("errorTitle", ""),
            prompt_message=attrs.get("prompt", ""),
            prompt_message_title=attrs.get("promptTitle", ""),
        )
        for text in attrs.get("sqref", "").split():
            validation.add_range(text)
        for child in element:
            name = _local_name(child.tag)
            if name == "formula1":
                validation.formula1 = child.text or ""
            elif name == "formula2":
                validation.formula2 = child.text or ""
        return validation