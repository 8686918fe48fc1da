"""Cell formatting: number format, font, alignment, fill and protection."""

from __future__ import annotations

import itertools
from enum import Enum
from typing import Any


class FontUnderline(Enum):
    NONE = 0
    SINGLE = 1
    DOUBLE = 2
    SINGLE_ACCOUNTING = 3
    DOUBLE_ACCOUNTING = 4


class HorizontalAlignment(Enum):
    GENERAL = 0
    LEFT = 1
    CENTER = 2
    RIGHT = 3
    FILL = 4
    JUSTIFY = 5
    MERGE = 6
    DISTRIBUTED = 7


class VerticalAlignment(Enum):
    TOP = 0
    CENTER = 1
    BOTTOM = 2
    JUSTIFY = 3
    DISTRIBUTED = 4


# Built-in number format ids that show dates or times.
_DATE_TIME_IDS = frozenset(
    itertools.chain(range(14, 23), range(27, 37), range(45, 48), range(50, 59))
)


def _is_date_time_code(code: str) -> bool:
    chars = iter(code)
    for char in chars:
        if char == "[":
            inner = "".join(itertools.takewhile(lambda c: c != "]", chars))
            if inner.lower() in ("h", "m", "s"):
                return True
        elif char == '"':
            for quoted in chars:
                if quoted == '"':
                    break
        elif char in "\\_*":
            next(chars, None)
        elif char in "dDmMhHyYsS":
            return True
    return False


class _Property:
    """A format attribute stored in the format's property table."""

    def __init__(self, default: Any = None) -> None:
        self.default = default

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Format | None, owner: type | None = None) -> Any:
        if obj is None:
            return self
        return obj._properties.get(self.name, self.default)

    def __set__(self, obj: Format, value: Any) -> None:
        obj._assign(self.name, value)


class Format:
    """A set of formatting properties; unset properties report their defaults.

    Assigning ``None`` to a property clears it.
    """

    font_size = _Property(11)
    font_name = _Property("Calibri")
    font_bold = _Property(False)
    font_italic = _Property(False)
    font_strike_out = _Property(False)
    font_outline = _Property(False)
    font_color = _Property(None)
    font_underline = _Property(FontUnderline.NONE)
    horizontal_alignment = _Property(HorizontalAlignment.GENERAL)
    vertical_alignment = _Property(VerticalAlignment.BOTTOM)
    text_wrap = _Property(False)
    rotation = _Property(0)
    indent = _Property(0)
    shrink_to_fit = _Property(False)
    pattern_foreground_color = _Property(None)
    pattern_background_color = _Property(None)
    locked = _Property(False)
    hidden = _Property(False)

    def __init__(self, **properties: Any) -> None:
        self._properties: dict[str, Any] = {}
        self._valid = False
        self.xf_index: int | None = None
        self.dxf_index: int | None = None
        for name, value in properties.items():
            if name not in _SETTABLE:
                raise TypeError(f"unknown format property: {name}")
            setattr(self, name, value)

    def _assign(self, name: str, value: Any) -> None:
        if value is None:
            self._properties.pop(name, None)
            return
        self._properties[name] = value
        self._valid = True

    @property
    def number_format(self) -> str:
        return self._properties.get("number_format", "")

    @number_format.setter
    def number_format(self, code: str | None) -> None:
        if not code:
            return
        self._assign("number_format", code)
        self._properties.pop("number_format_index", None)

    @property
    def number_format_index(self) -> int:
        return self._properties.get("number_format_index", 0)

    @number_format_index.setter
    def number_format_index(self, index: int | None) -> None:
        self._assign("number_format_index", index)
        if index is not None:
            self._properties.pop("number_format", None)

    def is_valid(self) -> bool:
        """True once any property has been given a value."""
        return self._valid

    def is_empty(self) -> bool:
        return not self._properties

    def is_date_time_format(self) -> bool:
        if "number_format" in self._properties:
            return _is_date_time_code(self._properties["number_format"])
        if "number_format_index" in self._properties:
            return self._properties["number_format_index"] in _DATE_TIME_IDS
        return False

    def merge_format(self, modifier: Format) -> None:
        """Apply the properties set on ``modifier`` over this format's own."""
        if not modifier.is_valid():
            return
        if not self.is_valid():
            self._properties = dict(modifier._properties)
            self._valid = True
            self.xf_index = modifier.xf_index
            self.dxf_index = modifier.dxf_index
            return
        self._properties.update(modifier._properties)

    def copy(self) -> Format:
        clone = Format()
        clone._properties = dict(self._properties)
        clone._valid = self._valid
        clone.xf_index = self.xf_index
        clone.dxf_index = self.dxf_index
        return clone

    def key(self) -> tuple:
        """A key that is equal for formats with equal properties."""
        return tuple(sorted(self._properties.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Format):
            return NotImplemented
        return self.key() == other.key()

    def __repr__(self) -> str:
        items = ", ".join(f"{name}={value!r}" for name, value in self.key())
        return f"Format({items})"


_SETTABLE = frozenset(
    name for name, attr in vars(Format).items() if isinstance(attr, (_Property, property))
)