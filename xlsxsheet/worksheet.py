"""A worksheet: cell contents, merged ranges, rows, columns and page settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Any

from .cell import Cell, CellFormula, CellLocation, CellType, FormulaType
from .cellref import (
    COLUMN_MAX,
    ROW_MAX,
    STRING_MAX,
    CellRange,
    CellReference,
    column_to_letters,
    letters_to_column,
)
from .datavalidation import DataValidation, ValidationType
from .dates import datetime_from_number, datetime_to_number, time_to_number
from .format import FontUnderline, Format, VerticalAlignment
from .layout import ColumnInfo, ColumnLayout, RowInfo, SheetFormatProps
from .workbook import AbstractSheet, SheetType, Workbook

_URL_PATTERN = re.compile(r"^([fh]tt?ps?://)|(mailto:)|(file://)")
_REFERENCE = re.compile(
    r"(?<![A-Za-z0-9_])(\$?)([A-Z]{1,3})(\$?)([1-9][0-9]*)(?![A-Za-z0-9_(])"
)
_TIME_FORMAT = "hh:mm:ss"
_HYPERLINK_COLOR = "#0000FF"


def _shift_formula(text: str, root: CellReference, target: CellReference) -> str:
    """Move the relative references of a shared formula from ``root`` to ``target``."""
    row_offset = target.row - root.row
    column_offset = target.column - root.column

    def shift(match: re.Match[str]) -> str:
        col_abs, letters, row_abs, digits = match.groups()
        column = letters_to_column(letters)
        row = int(digits)
        if not col_abs:
            column += column_offset
        if not row_abs:
            row += row_offset
        return f"{col_abs}{column_to_letters(column)}{row_abs}{row}"

    # Text inside double quotes is literal and left alone.
    parts = text.split('"')
    parts[::2] = [_REFERENCE.sub(shift, part) for part in parts[::2]]
    return '"'.join(parts)


@dataclass
class HyperlinkData:
    """A hyperlink stored for one cell; internal links have ``external`` false."""

    external: bool = True
    target: str = ""
    location: str = ""
    display: str = ""
    tooltip: str = ""


RichText = list[tuple[str, Format]]


class Worksheet(AbstractSheet):
    """One sheet of cells. Rows and columns start at 1."""

    def __init__(self, name: str = "Sheet1", sheet_id: int = 1, workbook: Workbook | None = None) -> None:
        super().__init__(name, sheet_id, workbook, SheetType.WORK_SHEET)
        self.window_protection = False
        self.show_formulas = False
        self.show_grid_lines = True
        self.show_row_col_headers = True
        self.show_zeros = True
        self.right_to_left = False
        self.tab_selected = False
        self.show_ruler = False
        self.show_outline_symbols = True
        self.show_white_space = True

        self.dimension_range = CellRange()
        self.cell_table: dict[int, dict[int, Cell]] = {}
        self.url_table: dict[int, dict[int, HyperlinkData]] = {}
        self.shared_formulas: dict[int, CellFormula] = {}
        self.merges: list[CellRange] = []
        self.data_validations: list[DataValidation] = []
        self.rows_info: dict[int, RowInfo] = {}
        self.columns = ColumnLayout()
        self.sheet_format_props = SheetFormatProps()

        self.default_row_height = 15.0
        self.default_row_zeroed = False
        self.outline_row_level = 0
        self.outline_col_level = 0

        # Attribute values of <pageMargins>, <pageSetup> and <headerFooter>, as text.
        self.page_margins: dict[str, str] = {}
        self.page_setup: dict[str, str] = {}
        self.header_footer_align_with_margins = ""
        self.odd_header: str | None = None
        self.odd_footer: str | None = None

    # ----------------------------------------------------------------- positions

    def check_dimensions(
        self, row: int, column: int, ignore_row: bool = False, ignore_col: bool = False
    ) -> bool:
        """Return whether the position is on the sheet, widening the dimension unless told not to."""
        if not (1 <= row <= ROW_MAX and 1 <= column <= COLUMN_MAX):
            return False
        dim = self.dimension_range
        if not ignore_row:
            if row < dim.first_row or dim.first_row == -1:
                dim.first_row = row
            if row > dim.last_row:
                dim.last_row = row
        if not ignore_col:
            if column < dim.first_column or dim.first_column == -1:
                dim.first_column = column
            if column > dim.last_column:
                dim.last_column = column
        return True

    def _require(self, row: int, column: int) -> None:
        if not self.check_dimensions(row, column):
            raise ValueError(f"cell ({row}, {column}) is outside the sheet")

    def dimension(self) -> CellRange:
        """Return the range that contains cell data."""
        return replace(self.dimension_range)

    def validate_dimension(self) -> None:
        """Derive the dimension from the cells when it is missing."""
        if self.dimension_range.is_valid() or not self.cell_table:
            return
        rows = [row for row, columns in self.cell_table.items() if columns]
        columns = [column for cells in self.cell_table.values() for column in cells]
        if not rows:
            return
        candidate = CellRange(min(rows), min(columns), max(rows), max(columns))
        if candidate.is_valid():
            self.dimension_range = candidate

    # --------------------------------------------------------------------- cells

    def cell_at(self, row: int, column: int) -> Cell | None:
        return self.cell_table.get(row, {}).get(column)

    def _cell_format(self, row: int, column: int) -> Format:
        cell = self.cell_at(row, column)
        return cell.format if cell is not None else Format()

    def _resolve_format(self, row: int, column: int, fmt: Format | None) -> Format:
        base = fmt if fmt is not None and fmt.is_valid() else self._cell_format(row, column)
        return base.copy()

    def _store(self, row: int, column: int, value: Any, cell_type: CellType, fmt: Format) -> Cell:
        cell = Cell(value=value, cell_type=cell_type, format=fmt, parent=self)
        self.cell_table.setdefault(row, {})[column] = cell
        return cell

    def write(self, row: int, column: int, value: Any, fmt: Format | None = None) -> None:
        """Write a value, choosing the cell kind from its Python type."""
        self._require(row, column)
        if value is None:
            self.write_blank(row, column, fmt)
        elif isinstance(value, str):
            if value.startswith("="):
                self.write_formula(row, column, CellFormula(value), fmt)
            elif self.workbook.strings_to_hyperlinks_enabled and _URL_PATTERN.search(value):
                self.write_hyperlink(row, column, value)
            else:
                self.write_string(row, column, value, fmt)
        elif isinstance(value, (list, tuple)):
            self.write_string(row, column, list(value), fmt)
        elif isinstance(value, bool):
            self.write_bool(row, column, value, fmt)
        elif isinstance(value, (int, float)):
            self.write_numeric(row, column, value, fmt)
        elif isinstance(value, datetime):
            self.write_datetime(row, column, value, fmt)
        elif isinstance(value, date):
            self.write_date(row, column, value, fmt)
        elif isinstance(value, time):
            self.write_time(row, column, value, fmt)
        else:
            raise TypeError(f"cannot write a value of type {type(value).__name__}")

    def read(self, row: int, column: int) -> Any:
        """Return the cell's content: formula text, a date/time, or the stored value."""
        cell = self.cell_at(row, column)
        if cell is None:
            return None
        if cell.has_formula():
            formula = cell.formula
            if formula.formula_type is FormulaType.NORMAL:
                return "=" + formula.text
            if formula.formula_type is FormulaType.SHARED:
                if formula.text:
                    return "=" + formula.text
                root = self.shared_formulas.get(formula.shared_index, CellFormula())
                shifted = _shift_formula(
                    root.text, root.reference.top_left(), CellReference(row, column)
                )
                return "=" + shifted
        if cell.value is not None and cell.is_date_time():
            return datetime_from_number(float(cell.value), self.workbook.date1904)
        return cell.value

    def write_string(
        self, row: int, column: int, value: str | RichText, fmt: Format | None = None
    ) -> None:
        """Write a plain or rich string into the shared string table."""
        self._require(row, column)
        fragments = [(value, Format())] if isinstance(value, str) else list(value)
        self.workbook.shared_strings.add(fragments)
        cell_format = self._resolve_format(row, column, fmt)
        if len(fragments) == 1 and fragments[0][1].is_valid():
            cell_format.merge_format(fragments[0][1])
        self.workbook.styles.add_xf_format(cell_format)
        text = "".join(fragment for fragment, _ in fragments)
        cell = self._store(row, column, text, CellType.SHARED_STRING, cell_format)
        cell.rich_string = fragments

    def write_inline_string(self, row: int, column: int, value: str, fmt: Format | None = None) -> None:
        self._require(row, column)
        content = value[:STRING_MAX]
        cell_format = self._resolve_format(row, column, fmt)
        self.workbook.styles.add_xf_format(cell_format)
        self._store(row, column, content, CellType.INLINE_STRING, cell_format)

    def write_numeric(self, row: int, column: int, value: float, fmt: Format | None = None) -> None:
        self._require(row, column)
        cell_format = self._resolve_format(row, column, fmt)
        self.workbook.styles.add_xf_format(cell_format)
        self._store(row, column, float(value), CellType.NUMBER, cell_format)

    def write_formula(
        self,
        row: int,
        column: int,
        formula: CellFormula | str,
        fmt: Format | None = None,
        result: float = 0.0,
    ) -> None:
        """Write a formula; a shared formula also marks the other cells of its range."""
        self._require(row, column)
        if isinstance(formula, str):
            formula = CellFormula(formula)
        cell_format = self._resolve_format(row, column, fmt)
        self.workbook.styles.add_xf_format(cell_format)

        formula = replace(formula, calculate=True)
        if formula.formula_type is FormulaType.SHARED:
            index = 0
            while index in self.shared_formulas:
                index += 1
            formula.shared_index = index
            self.shared_formulas[index] = formula

        cell = self._store(row, column, result, CellType.NUMBER, cell_format)
        cell.formula = formula

        if formula.formula_type is not FormulaType.SHARED:
            return
        member = CellFormula("", FormulaType.SHARED, shared_index=formula.shared_index)
        area = formula.reference
        for r in range(area.first_row, area.last_row + 1):
            for c in range(area.first_column, area.last_column + 1):
                if (r, c) == (row, column):
                    continue
                existing = self.cell_at(r, c)
                if existing is None:
                    existing = self._store(r, c, result, CellType.NUMBER, cell_format)
                existing.formula = member

    def write_blank(self, row: int, column: int, fmt: Format | None = None) -> None:
        """Write an empty cell that keeps only its format."""
        self._require(row, column)
        cell_format = self._resolve_format(row, column, fmt)
        self.workbook.styles.add_xf_format(cell_format)
        self._store(row, column, None, CellType.NUMBER, cell_format)

    def write_bool(self, row: int, column: int, value: bool, fmt: Format | None = None) -> None:
        self._require(row, column)
        cell_format = self._resolve_format(row, column, fmt)
        self.workbook.styles.add_xf_format(cell_format)
        self._store(row, column, bool(value), CellType.BOOLEAN, cell_format)

    def _date_format(self, row: int, column: int, fmt: Format | None, code: str) -> Format:
        cell_format = self._resolve_format(row, column, fmt)
        if not cell_format.is_valid() or not cell_format.is_date_time_format():
            cell_format.number_format = code
        self.workbook.styles.add_xf_format(cell_format)
        return cell_format

    def write_datetime(self, row: int, column: int, value: datetime, fmt: Format | None = None) -> None:
        self._require(row, column)
        cell_format = self._date_format(row, column, fmt, self.workbook.default_date_format)
        number = datetime_to_number(value, self.workbook.date1904)
        self._store(row, column, number, CellType.NUMBER, cell_format)

    def write_date(self, row: int, column: int, value: date, fmt: Format | None = None) -> None:
        self._require(row, column)
        cell_format = self._date_format(row, column, fmt, self.workbook.default_date_format)
        number = datetime_to_number(datetime.combine(value, time()), self.workbook.date1904)
        self._store(row, column, number, CellType.NUMBER, cell_format)

    def write_time(self, row: int, column: int, value: time, fmt: Format | None = None) -> None:
        self._require(row, column)
        cell_format = self._date_format(row, column, fmt, _TIME_FORMAT)
        self._store(row, column, time_to_number(value), CellType.NUMBER, cell_format)

    def write_hyperlink(
        self,
        row: int,
        column: int,
        url: str,
        fmt: Format | None = None,
        display: str = "",
        tip: str = "",
    ) -> None:
        """Write a link shown as text; the target goes to the sheet's hyperlink table."""
        self._require(row, column)
        display_text = display or url
        if display_text.startswith("mailto:"):
            display_text = display_text.replace("mailto:", "")
        display_text = display_text[:STRING_MAX]

        target, sep, location = url.partition("#")
        if not sep:
            target, location = url, ""

        cell_format = self._resolve_format(row, column, fmt)
        if not cell_format.is_valid():
            cell_format.vertical_alignment = VerticalAlignment.CENTER
            cell_format.font_color = _HYPERLINK_COLOR
            cell_format.font_underline = FontUnderline.SINGLE
        self.workbook.styles.add_xf_format(cell_format)

        self.workbook.shared_strings.add(display_text)
        cell = self._store(row, column, display_text, CellType.SHARED_STRING, cell_format)
        cell.rich_string = [(display_text, Format())]
        self.url_table.setdefault(row, {})[column] = HyperlinkData(
            external=True, target=target, location=location, display="", tooltip=tip
        )

    def add_data_validation(self, validation: DataValidation) -> None:
        if not validation.ranges or validation.validation_type is ValidationType.NONE:
            raise ValueError("a data validation needs a type and at least one range")
        self.data_validations.append(validation)

    # -------------------------------------------------------------------- merges

    def merge_cells(self, cell_range: CellRange | str, fmt: Format | None = None) -> None:
        """Merge a range; every cell but the top-left one is cleared."""
        if isinstance(cell_range, str):
            cell_range = CellRange.from_string(cell_range)
        if cell_range.row_count() < 2 and cell_range.column_count() < 2:
            raise ValueError("a merged range needs at least two cells")
        self._require(cell_range.first_row, cell_range.first_column)
        valid_format = fmt is not None and fmt.is_valid()
        if valid_format:
            self.workbook.styles.add_xf_format(fmt)
        for row in range(cell_range.first_row, cell_range.last_row + 1):
            for column in range(cell_range.first_column, cell_range.last_column + 1):
                top_left = (row, column) == (cell_range.first_row, cell_range.first_column)
                cell = self.cell_at(row, column)
                if top_left and cell is not None:
                    if valid_format:
                        cell.format = fmt
                else:
                    self.write_blank(row, column, fmt)
        self.merges.append(replace(cell_range))

    def unmerge_cells(self, cell_range: CellRange | str) -> None:
        if isinstance(cell_range, str):
            cell_range = CellRange.from_string(cell_range)
        try:
            self.merges.remove(cell_range)
        except ValueError:
            raise ValueError(f"range {cell_range} is not merged") from None

    def merged_cells(self) -> list[CellRange]:
        if self.sheet_type is not SheetType.WORK_SHEET:
            return []
        return list(self.merges)

    # ------------------------------------------------------------------- columns

    def _column_infos(self, col_first: int, col_last: int) -> list[ColumnInfo]:
        if col_first > col_last:
            return []
        if not self.check_dimensions(1, col_last, True, False):
            return []
        if not self.check_dimensions(1, col_first, True, False):
            return []
        return self.columns.infos_for(col_first, col_last)

    def _required_column_infos(self, col_first: int, col_last: int) -> list[ColumnInfo]:
        infos = self._column_infos(col_first, col_last)
        if not infos:
            raise ValueError(f"invalid column range {col_first}..{col_last}")
        return infos

    def set_column_width(self, col_first: int, col_last: int, width: float) -> None:
        for info in self._required_column_infos(col_first, col_last):
            info.width = width
            info.is_set_width = True

    def set_column_format(self, col_first: int, col_last: int, fmt: Format) -> None:
        for info in self._required_column_infos(col_first, col_last):
            info.format = fmt
        self.workbook.styles.add_xf_format(fmt)

    def set_column_hidden(self, col_first: int, col_last: int, hidden: bool) -> None:
        for info in self._required_column_infos(col_first, col_last):
            info.hidden = hidden

    def column_width(self, column: int) -> float:
        """Return the column's width in characters, or the sheet default."""
        infos = self._column_infos(column, column)
        if len(infos) == 1 and infos[0].is_set_width:
            return infos[0].width
        return self.sheet_format_props.default_col_width

    def column_format(self, column: int) -> Format:
        infos = self._column_infos(column, column)
        return infos[0].format if len(infos) == 1 else Format()

    def is_column_hidden(self, column: int) -> bool:
        infos = self._column_infos(column, column)
        return len(infos) == 1 and infos[0].hidden

    def group_columns(self, col_first: int, col_last: int, collapsed: bool = True) -> None:
        self.columns.group(col_first, col_last, collapsed)

    # ---------------------------------------------------------------------- rows

    def _row_infos(self, row_first: int, row_last: int) -> list[RowInfo]:
        first_column = self.dimension_range.first_column
        min_col = first_column if first_column >= 1 else 1
        infos = []
        for row in range(row_first, row_last + 1):
            if not self.check_dimensions(row, min_col, False, True):
                continue
            infos.append(self.rows_info.setdefault(row, RowInfo()))
        return infos

    def _required_row_infos(self, row_first: int, row_last: int) -> list[RowInfo]:
        infos = self._row_infos(row_first, row_last)
        if not infos:
            raise ValueError(f"invalid row range {row_first}..{row_last}")
        return infos

    def set_row_height(self, row_first: int, row_last: int, height: float) -> None:
        for info in self._required_row_infos(row_first, row_last):
            info.height = height
            info.custom_height = True

    def set_row_format(self, row_first: int, row_last: int, fmt: Format) -> None:
        infos = self._row_infos(row_first, row_last)
        for info in infos:
            info.format = fmt
        self.workbook.styles.add_xf_format(fmt)
        if not infos:
            raise ValueError(f"invalid row range {row_first}..{row_last}")

    def set_row_hidden(self, row_first: int, row_last: int, hidden: bool) -> None:
        for info in self._required_row_infos(row_first, row_last):
            info.hidden = hidden

    def _row_info(self, row: int) -> RowInfo | None:
        dim = self.dimension_range
        min_col = dim.first_column if dim.is_valid() else 1
        if not self.check_dimensions(row, min_col, False, True):
            return None
        return self.rows_info.get(row)

    def row_height(self, row: int) -> float:
        info = self._row_info(row)
        return self.sheet_format_props.default_row_height if info is None else info.height

    def row_format(self, row: int) -> Format:
        info = self._row_info(row)
        return Format() if info is None else info.format

    def is_row_hidden(self, row: int) -> bool:
        info = self._row_info(row)
        return info is not None and info.hidden

    def group_rows(self, row_first: int, row_last: int, collapsed: bool = True) -> None:
        """Raise the outline level of the rows; collapsing hides them."""
        for row in range(row_first, row_last + 1):
            info = self.rows_info.setdefault(row, RowInfo())
            info.outline_level += 1
            if collapsed:
                info.hidden = True
        if collapsed:
            self.rows_info.setdefault(row_last + 1, RowInfo()).collapsed = True

    # ---------------------------------------------------------------------- misc

    def set_start_page(self, page: int) -> None:
        self.page_setup["firstPageNumber"] = str(page)

    def full_cells(self) -> tuple[list[CellLocation], int, int]:
        """Return every cell in row then column order, with the largest row and column."""
        if self.sheet_type is SheetType.CHART_SHEET:
            return [], -1, -1
        if self.sheet_type is not SheetType.WORK_SHEET:
            raise ValueError(f"unsupported sheet type: {self.sheet_type.name}")
        locations = []
        max_row = max_col = -1
        for row in sorted(self.cell_table):
            for column in sorted(self.cell_table[row]):
                max_row = max(max_row, row)
                max_col = max(max_col, column)
                locations.append(CellLocation(row, column, self.cell_table[row][column]))
        return locations, max_row, max_col

    def copy(self, name: str, sheet_id: int) -> Worksheet:
        """Return a new sheet in the same workbook with this sheet's cells and merges."""
        sheet = Worksheet(name, sheet_id, self.workbook)
        sheet.dimension_range = replace(self.dimension_range)
        for row, cells in self.cell_table.items():
            for column, cell in cells.items():
                clone = replace(cell, parent=sheet)
                if clone.cell_type is CellType.SHARED_STRING:
                    self.workbook.shared_strings.add(
                        clone.rich_string if clone.rich_string else str(clone.value)
                    )
                sheet.cell_table.setdefault(row, {})[column] = clone
        sheet.merges = [replace(merge) for merge in self.merges]
        return sheet