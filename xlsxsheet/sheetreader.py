"""Load a worksheet from its SpreadsheetML part (``xl/worksheets/sheetN.xml``)."""

from __future__ import annotations

import logging
import posixpath
import xml.etree.ElementTree as ET
from collections.abc import Iterator

from .cell import Cell, CellFormula, CellType, FormulaType
from .cellref import CellRange, CellReference
from .datavalidation import DataValidation
from .format import Format
from .layout import ColumnInfo, ColumnLayout, RowInfo, SheetFormatProps, calculate_col_width
from .relationships import DOCUMENT_SCHEMA
from .worksheet import HyperlinkData, Worksheet

_log = logging.getLogger(__name__)

_CELL_TYPES = {
    "s": CellType.SHARED_STRING,
    "inlineStr": CellType.INLINE_STRING,
    "str": CellType.STRING,
    "b": CellType.BOOLEAN,
    "e": CellType.ERROR,
    "d": CellType.DATE,
    "n": CellType.NUMBER,
}

_ROW_INFO_ATTRIBUTES = ("customFormat", "customHeight", "hidden", "outlineLevel", "collapsed")

_PAGE_SETUP_ATTRIBUTES = (
    "paperSize",
    "scale",
    "firstPageNumber",
    "orientation",
    "useFirstPageNumber",
    "horizontalDpi",
    "verticalDpi",
    "copies",
)
_PAGE_MARGIN_ATTRIBUTES = ("footer", "header", "bottom", "top", "right", "left")

_REL_ID_KEYS = ("r:id", f"{{{DOCUMENT_SCHEMA}}}id")


def _local(tag: str) -> str:
    return tag.rpartition("}")[2]


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    return (child for child in element if _local(child.tag) == name)


def _to_int(text: str | None) -> int:
    try:
        return int((text or "").strip())
    except ValueError:
        return 0


def _to_float(text: str | None) -> float:
    try:
        return float((text or "").strip())
    except ValueError:
        return 0.0


def _is_one(attrs: dict[str, str], name: str) -> bool:
    return attrs.get(name) == "1"


def _not_zero(attrs: dict[str, str], name: str) -> bool:
    return attrs.get(name) != "0"


def _rel_id(element: ET.Element) -> str | None:
    for key in _REL_ID_KEYS:
        if key in element.attrib:
            return element.attrib[key]
    return None


def _relationship_target(sheet: Worksheet, rel_id: str) -> str:
    try:
        relationship = sheet.relationships.get_by_id(rel_id)
    except KeyError:
        return ""
    return relationship.target if relationship is not None else ""


def _load_sheet_views(sheet: Worksheet, element: ET.Element) -> None:
    for view in _children(element, "sheetView"):
        attrs = view.attrib
        sheet.window_protection = _is_one(attrs, "windowProtection")
        sheet.show_formulas = _is_one(attrs, "showFormulas")
        sheet.right_to_left = _is_one(attrs, "rightToLeft")
        sheet.tab_selected = _is_one(attrs, "tabSelected")
        sheet.show_grid_lines = _not_zero(attrs, "showGridLines")
        sheet.show_row_col_headers = _not_zero(attrs, "showRowColHeaders")
        sheet.show_zeros = _not_zero(attrs, "showZeros")
        sheet.show_ruler = _not_zero(attrs, "showRuler")
        sheet.show_outline_symbols = _not_zero(attrs, "showOutlineSymbols")
        sheet.show_white_space = _not_zero(attrs, "showWhiteSpace")


def _load_sheet_format_props(sheet: Worksheet, element: ET.Element) -> None:
    props = SheetFormatProps()
    width_set = False
    for key, value in element.attrib.items():
        name = _local(key)
        if name == "baseColWidth":
            props.base_col_width = _to_int(value)
        elif name == "customHeight":
            props.custom_height = value == "1"
        elif name == "defaultColWidth":
            props.default_col_width = _to_float(value)
            width_set = True
        elif name == "defaultRowHeight":
            props.default_row_height = _to_float(value)
        elif name == "outlineLevelCol":
            props.outline_level_col = _to_int(value)
        elif name == "outlineLevelRow":
            props.outline_level_row = _to_int(value)
        elif name == "thickBottom":
            props.thick_bottom = value == "1"
        elif name == "thickTop":
            props.thick_top = value == "1"
        elif name == "zeroHeight":
            props.zero_height = value == "1"
    if not width_set:
        props.default_col_width = calculate_col_width(props.base_col_width)
    sheet.sheet_format_props = props


def _load_columns(sheet: Worksheet, element: ET.Element) -> None:
    loaded = []
    for col in _children(element, "col"):
        attrs = col.attrib
        info = ColumnInfo(_to_int(attrs.get("min")), _to_int(attrs.get("max")))
        if "customWidth" in attrs:
            info.custom_width = attrs["customWidth"] == "1"
        if "width" in attrs:
            info.width = _to_float(attrs["width"])
            info.is_set_width = True
        info.hidden = _is_one(attrs, "hidden")
        info.collapsed = _is_one(attrs, "collapsed")
        if "style" in attrs:
            info.format = sheet.workbook.styles.xf_format(_to_int(attrs["style"]))
        if "outlineLevel" in attrs:
            info.outline_level = _to_int(attrs["outlineLevel"])
        loaded.append(info)
    sheet.columns = ColumnLayout([*sheet.columns, *loaded])


def _load_row_info(sheet: Worksheet, row: ET.Element) -> None:
    attrs = row.attrib
    if not any(name in attrs for name in _ROW_INFO_ATTRIBUTES):
        return
    info = RowInfo()
    if "customFormat" in attrs and "s" in attrs:
        info.format = sheet.workbook.styles.xf_format(_to_int(attrs["s"]))
    if "customHeight" in attrs:
        info.custom_height = attrs["customHeight"] == "1"
        if "ht" in attrs:
            info.height = _to_float(attrs["ht"])
    info.hidden = _is_one(attrs, "hidden")
    info.collapsed = _is_one(attrs, "collapsed")
    if "outlineLevel" in attrs:
        info.outline_level = _to_int(attrs["outlineLevel"])
    if "r" in attrs:
        sheet.rows_info[_to_int(attrs["r"])] = info


def _shared_string_value(sheet: Worksheet, text: str, cell: Cell) -> str:
    try:
        item = sheet.workbook.shared_strings.get(_to_int(text))
    except IndexError:
        return ""
    if isinstance(item, str):
        return item
    fragments = list(item)
    cell.rich_string = fragments
    return "".join(fragment for fragment, _ in fragments)


def _load_cell(sheet: Worksheet, element: ET.Element) -> None:
    attrs = element.attrib
    position = CellReference.from_string(attrs.get("r", ""))
    if not position.is_valid():
        _log.warning("cell without a valid position skipped")
        return

    fmt = Format()
    if "s" in attrs:
        fmt = sheet.workbook.styles.xf_format(_to_int(attrs["s"]))

    cell_type = CellType.CUSTOM
    if "t" in attrs:
        cell_type = _CELL_TYPES.get(attrs["t"], CellType.CUSTOM)
    if Cell(value=None, cell_type=cell_type, format=fmt, parent=sheet).is_date_time():
        cell_type = CellType.DATE

    cell = Cell(value=None, cell_type=cell_type, format=fmt, parent=sheet)
    for child in element:
        name = _local(child.tag)
        if name == "f":
            formula = CellFormula.from_element(child)
            cell.formula = formula
            if formula.formula_type is FormulaType.SHARED and formula.text:
                sheet.shared_formulas[formula.shared_index] = formula
        elif name == "v":
            text = child.text or ""
            if cell_type is CellType.SHARED_STRING:
                cell.value = _shared_string_value(sheet, text, cell)
            elif cell_type in (CellType.NUMBER, CellType.DATE):
                cell.value = _to_float(text)
            elif cell_type is CellType.BOOLEAN:
                cell.value = _to_int(text) != 0
            else:
                cell.value = text
        elif name == "is":
            # Rich inline runs are read as plain text; the last <t> wins.
            for node in child.iter():
                if _local(node.tag) == "t":
                    cell.value = node.text or ""

    sheet.cell_table.setdefault(position.row, {})[position.column] = cell


def _load_sheet_data(sheet: Worksheet, element: ET.Element) -> None:
    for row in _children(element, "row"):
        _load_row_info(sheet, row)
        for cell in _children(row, "c"):
            _load_cell(sheet, cell)


def _load_merge_cells(sheet: Worksheet, element: ET.Element) -> None:
    count = _to_int(element.attrib.get("count"))
    for merge in _children(element, "mergeCell"):
        sheet.merges.append(CellRange.from_string(merge.attrib.get("ref", "")))
    if len(sheet.merges) != count:
        _log.warning("read merge cells error")


def _load_data_validations(sheet: Worksheet, element: ET.Element) -> None:
    count = _to_int(element.attrib.get("count"))
    for item in _children(element, "dataValidation"):
        sheet.data_validations.append(DataValidation.from_element(item))
    if len(sheet.data_validations) != count:
        _log.debug("read data validation error")


def _load_hyperlinks(sheet: Worksheet, element: ET.Element) -> None:
    for item in _children(element, "hyperlink"):
        attrs = item.attrib
        position = CellReference.from_string(attrs.get("ref", ""))
        if not position.is_valid():
            continue
        link = HyperlinkData(
            external=False,
            display=attrs.get("display", ""),
            tooltip=attrs.get("tooltip", ""),
            location=attrs.get("location", ""),
        )
        rel_id = _rel_id(item)
        if rel_id is not None:
            link.external = True
            link.target = _relationship_target(sheet, rel_id)
        sheet.url_table.setdefault(position.row, {})[position.column] = link


def _load_page_setup(sheet: Worksheet, element: ET.Element) -> None:
    attrs = element.attrib
    for name in _PAGE_SETUP_ATTRIBUTES:
        sheet.page_setup[name] = attrs.get(name, "").strip()
    sheet.page_setup["r:id"] = (_rel_id(element) or "").strip()


def _load_page_margins(sheet: Worksheet, element: ET.Element) -> None:
    for name in _PAGE_MARGIN_ATTRIBUTES:
        sheet.page_margins[name] = element.attrib.get(name, "").strip()


def _load_header_footer(sheet: Worksheet, element: ET.Element) -> None:
    for child in element:
        name = _local(child.tag)
        if name == "oddHeader":
            sheet.odd_header = child.text or ""
        elif name == "oddFooter":
            sheet.odd_footer = child.text or ""


def _load_drawing(sheet: Worksheet, element: ET.Element) -> None:
    target = _relationship_target(sheet, _rel_id(element) or "")
    base = posixpath.dirname(sheet.file_path)
    path = posixpath.join(base, target) if base else target
    sheet.drawing = posixpath.normpath(path) if path else ""


def load_worksheet(sheet: Worksheet, data: bytes | str) -> Worksheet:
    """Fill ``sheet`` from worksheet XML and return it.

    Hyperlink and drawing targets are resolved through ``sheet.relationships``,
    which must already be loaded. Malformed XML raises ``ValueError``.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as error:
        raise ValueError(f"malformed worksheet XML: {error}") from error

    handlers = {
        "sheetViews": _load_sheet_views,
        "sheetFormatPr": _load_sheet_format_props,
        "cols": _load_columns,
        "sheetData": _load_sheet_data,
        "mergeCells": _load_merge_cells,
        "dataValidations": _load_data_validations,
        "hyperlinks": _load_hyperlinks,
        "pageSetup": _load_page_setup,
        "pageMargins": _load_page_margins,
        "headerFooter": _load_header_footer,
        "drawing": _load_drawing,
    }
    for element in root:
        name = _local(element.tag)
        if name == "dimension":
            sheet.dimension_range = CellRange.from_string(element.attrib.get("ref", ""))
            continue
        handler = handlers.get(name)
        if handler is not None:
            handler(sheet, element)

    sheet.validate_dimension()
    return sheet