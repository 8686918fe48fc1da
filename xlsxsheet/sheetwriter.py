"""Serialise a worksheet to its SpreadsheetML part (``xl/worksheets/sheetN.xml``)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from .cell import Cell, CellType
from .cellref import COLUMN_MAX, CellReference
from .dates import is_space_reserve_needed
from .format import Format
from .relationships import DOCUMENT_SCHEMA
from .worksheet import Worksheet

MAIN_SCHEMA = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
_DECLARATION = b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

_PAGE_MARGIN_KEYS = ("left", "right", "top", "bottom", "header", "footer")
_PAGE_SETUP_KEYS = (
    "verticalDpi",
    "horizontalDpi",
    "useFirstPageNumber",
    "firstPageNumber",
    "scale",
    "paperSize",
    "orientation",
    "copies",
)


def _short_number(value: float) -> str:
    """Six significant digits, as used for heights."""
    return format(float(value), ".6g")


def _long_number(value: float) -> str:
    """Fifteen significant digits, as used for cell values and widths."""
    return format(float(value), ".15g")


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _value_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def _xf_index(sheet: Worksheet, fmt: Format) -> int:
    if fmt.xf_index is None:
        sheet.workbook.styles.add_xf_format(fmt)
    return fmt.xf_index


def _has_font_data(fmt: Format) -> bool:
    return any(name.startswith("font_") for name, _ in fmt.key())


def calculate_spans(sheet: Worksheet) -> dict[int, str]:
    """Return the ``spans`` text of each block of 16 rows, keyed by ``row // 16``.

    A block's span is stored when its last row (a multiple of 16, or the last
    row of the dimension) is reached.
    """
    spans: dict[int, str] = {}
    dim = sheet.dimension_range
    columns = range(dim.first_column, dim.last_column + 1)
    span_min = COLUMN_MAX + 1
    span_max = -1
    for row in range(dim.first_row, dim.last_row + 1):
        cells = sheet.cell_table.get(row)
        if cells:
            for column in columns:
                if column not in cells:
                    continue
                if span_max == -1:
                    span_min = span_max = column
                elif column < span_min:
                    span_min = column
                elif column > span_max:
                    span_max = column
        if (row % 16 == 0 or row == dim.last_row) and span_max != -1:
            spans[row // 16] = f"{span_min}:{span_max}"
            span_min = COLUMN_MAX + 1
            span_max = -1
    return spans


def dimension_string(sheet: Worksheet) -> str:
    """Return the ``ref`` of the ``<dimension>`` element; an empty sheet gives ``A1``."""
    if not sheet.dimension_range.is_valid():
        return "A1"
    return sheet.dimension_range.to_string()


def _sheet_view(sheet: Worksheet, parent: ET.Element) -> None:
    views = ET.SubElement(parent, "sheetViews")
    view = ET.SubElement(views, "sheetView")
    flags = (
        ("windowProtection", sheet.window_protection, True),
        ("showFormulas", sheet.show_formulas, True),
        ("showGridLines", sheet.show_grid_lines, False),
        ("showRowColHeaders", sheet.show_row_col_headers, False),
        ("showZeros", sheet.show_zeros, False),
        ("rightToLeft", sheet.right_to_left, True),
        ("tabSelected", sheet.tab_selected, True),
        ("showRuler", sheet.show_ruler, False),
        ("showOutlineSymbols", sheet.show_outline_symbols, False),
        ("showWhiteSpace", sheet.show_white_space, False),
    )
    for name, value, written_when in flags:
        if bool(value) is written_when:
            view.set(name, "1" if written_when else "0")
    view.set("workbookViewId", "0")


def _sheet_format(sheet: Worksheet, parent: ET.Element) -> None:
    element = ET.SubElement(parent, "sheetFormatPr")
    element.set("defaultRowHeight", _short_number(sheet.default_row_height))
    if sheet.default_row_height != 15:
        element.set("customHeight", "1")
    if sheet.default_row_zeroed:
        element.set("zeroHeight", "1")
    if sheet.outline_row_level:
        element.set("outlineLevelRow", str(sheet.outline_row_level))
    if sheet.outline_col_level:
        element.set("outlineLevelCol", str(sheet.outline_col_level))


def _columns(sheet: Worksheet, parent: ET.Element) -> None:
    if not len(sheet.columns):
        return
    cols = ET.SubElement(parent, "cols")
    for info in sheet.columns:
        col = ET.SubElement(cols, "col")
        col.set("min", str(info.first_column))
        col.set("max", str(info.last_column))
        if info.width:
            col.set("width", _long_number(info.width))
        if not info.format.is_empty():
            col.set("style", str(_xf_index(sheet, info.format)))
        if info.hidden:
            col.set("hidden", "1")
        if info.width:
            col.set("customWidth", "1")
        if info.outline_level:
            col.set("outlineLevel", str(info.outline_level))
        if info.collapsed:
            col.set("collapsed", "1")


def _cell_style(sheet: Worksheet, row: int, column: int, cell: Cell) -> int | None:
    if not cell.format.is_empty():
        return _xf_index(sheet, cell.format)
    row_info = sheet.rows_info.get(row)
    if row_info is not None and not row_info.format.is_empty():
        return _xf_index(sheet, row_info.format)
    column_info = sheet.columns.info_at(column)
    if column_info is not None and not column_info.format.is_empty():
        return _xf_index(sheet, column_info.format)
    return None


def _text_element(parent: ET.Element, text: str) -> None:
    element = ET.SubElement(parent, "t")
    if is_space_reserve_needed(text):
        element.set("xml:space", "preserve")
    element.text = text


def _cell(sheet: Worksheet, parent: ET.Element, row: int, column: int, cell: Cell) -> None:
    element = ET.SubElement(parent, "c")
    element.set("r", CellReference(row, column).to_string())
    style = _cell_style(sheet, row, column, cell)
    if style is not None:
        element.set("s", str(style))

    def add_formula() -> None:
        if cell.has_formula():
            element.append(cell.formula.to_element())

    kind = cell.cell_type
    if kind is CellType.SHARED_STRING:
        strings = sheet.workbook.shared_strings
        if cell.is_rich_string():
            index = strings.add(cell.rich_string)
        else:
            index = strings.add(_value_text(cell.value))
        element.set("t", "s")
        ET.SubElement(element, "v").text = str(index)
    elif kind is CellType.INLINE_STRING:
        element.set("t", "inlineStr")
        inline = ET.SubElement(element, "is")
        if cell.is_rich_string():
            for text, fmt in cell.rich_string:
                run = ET.SubElement(inline, "r")
                if _has_font_data(fmt):
                    ET.SubElement(run, "rPr")
                _text_element(run, text)
        else:
            _text_element(inline, _value_text(cell.value))
    elif kind is CellType.NUMBER:
        element.set("t", "n")
        add_formula()
        if cell.value is not None:
            ET.SubElement(element, "v").text = _long_number(_as_float(cell.value))
    elif kind is CellType.STRING:
        element.set("t", "str")
        add_formula()
        ET.SubElement(element, "v").text = _value_text(cell.value)
    elif kind is CellType.BOOLEAN:
        element.set("t", "b")
        add_formula()
        ET.SubElement(element, "v").text = "1" if cell.value else "0"
    elif kind is CellType.DATE:
        element.set("t", "n")
        ET.SubElement(element, "v").text = _value_text(cell.value)
    elif kind is CellType.ERROR:
        element.set("t", "e")
        ET.SubElement(element, "v").text = _value_text(cell.value)
    else:
        add_formula()
        if cell.value is not None:
            ET.SubElement(element, "v").text = _long_number(_as_float(cell.value))


def _sheet_data(sheet: Worksheet, parent: ET.Element) -> None:
    data = ET.SubElement(parent, "sheetData")
    dim = sheet.dimension_range
    if not dim.is_valid():
        return
    spans = calculate_spans(sheet)
    for row in range(dim.first_row, dim.last_row + 1):
        cells = sheet.cell_table.get(row)
        info = sheet.rows_info.get(row)
        if cells is None and info is None:
            continue
        element = ET.SubElement(data, "row")
        element.set("r", str(row))
        span = spans.get((row - 1) // 16)
        if span:
            element.set("spans", span)
        if info is not None:
            if not info.format.is_empty():
                element.set("s", str(_xf_index(sheet, info.format)))
                element.set("customFormat", "1")
            if info.custom_height:
                element.set("ht", _short_number(info.height))
                element.set("customHeight", "1")
            else:
                element.set("customHeight", "0")
            if info.hidden:
                element.set("hidden", "1")
            if info.outline_level > 0:
                element.set("outlineLevel", str(info.outline_level))
            if info.collapsed:
                element.set("collapsed", "1")
        if cells:
            for column in range(dim.first_column, dim.last_column + 1):
                cell = cells.get(column)
                if cell is not None:
                    _cell(sheet, element, row, column, cell)


def _merge_cells(sheet: Worksheet, parent: ET.Element) -> None:
    if not sheet.merges:
        return
    merges = ET.SubElement(parent, "mergeCells", {"count": str(len(sheet.merges))})
    for cell_range in sheet.merges:
        ET.SubElement(merges, "mergeCell", {"ref": cell_range.to_string()})


def _data_validations(sheet: Worksheet, parent: ET.Element) -> None:
    if not sheet.data_validations:
        return
    element = ET.SubElement(
        parent, "dataValidations", {"count": str(len(sheet.data_validations))}
    )
    for validation in sheet.data_validations:
        element.append(validation.to_element())


def _page_settings(sheet: Worksheet, parent: ET.Element) -> None:
    margins = sheet.page_margins
    if all(margins.get(key) for key in _PAGE_MARGIN_KEYS):
        ET.SubElement(parent, "pageMargins", {key: margins[key] for key in _PAGE_MARGIN_KEYS})

    setup = sheet.page_setup
    if setup.get("r:id"):
        element = ET.SubElement(parent, "pageSetup", {"r:id": setup["r:id"]})
        for key in _PAGE_SETUP_KEYS:
            if setup.get(key):
                element.set(key, setup[key])

    # Only a footer makes the header/footer block appear.
    if sheet.odd_footer is not None:
        element = ET.SubElement(parent, "headerFooter")
        if sheet.header_footer_align_with_margins:
            element.set("alignWithMargins", sheet.header_footer_align_with_margins)
        if sheet.odd_header is not None:
            ET.SubElement(element, "oddHeader").text = sheet.odd_header
        ET.SubElement(element, "oddFooter").text = sheet.odd_footer


def _hyperlinks(sheet: Worksheet, parent: ET.Element) -> None:
    if not sheet.url_table:
        return
    element = ET.SubElement(parent, "hyperlinks")
    for row in sorted(sheet.url_table):
        for column in sorted(sheet.url_table[row]):
            link = sheet.url_table[row][column]
            item = ET.SubElement(element, "hyperlink")
            item.set("ref", CellReference(row, column).to_string())
            if link.external:
                sheet.relationships.add_worksheet_relationship(
                    "/hyperlink", link.target, "External"
                )
                item.set("r:id", f"rId{len(sheet.relationships)}")
            if link.location:
                item.set("location", link.location)
            if link.display:
                item.set("display", link.display)
            if link.tooltip:
                item.set("tooltip", link.tooltip)


def _drawing(sheet: Worksheet, parent: ET.Element) -> None:
    if not sheet.drawing:
        return
    drawings = sheet.workbook.drawings
    index = drawings.index(sheet.drawing) if sheet.drawing in drawings else -1
    sheet.relationships.add_worksheet_relationship(
        "/drawing", f"../drawings/drawing{index + 1}.xml"
    )
    ET.SubElement(parent, "drawing", {"r:id": f"rId{len(sheet.relationships)}"})


def save_worksheet(sheet: Worksheet) -> bytes:
    """Return the worksheet part as UTF-8 XML; the sheet's relationships are rebuilt."""
    sheet.relationships.clear()
    root = ET.Element("worksheet", {"xmlns": MAIN_SCHEMA, "xmlns:r": DOCUMENT_SCHEMA})
    ET.SubElement(root, "dimension", {"ref": dimension_string(sheet)})
    _sheet_view(sheet, root)
    _sheet_format(sheet, root)
    _columns(sheet, root)
    _sheet_data(sheet, root)
    _merge_cells(sheet, root)
    _data_validations(sheet, root)
    _page_settings(sheet, root)
    _hyperlinks(sheet, root)
    _drawing(sheet, root)
    return _DECLARATION + ET.tostring(root, encoding="unicode").encode("utf-8")