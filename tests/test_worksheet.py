from datetime import date, datetime, time

import pytest

from xlsxsheet.cell import CellFormula, CellType, FormulaType
from xlsxsheet.cellref import CellRange
from xlsxsheet.datavalidation import DataValidation, ValidationType
from xlsxsheet.format import FontUnderline, Format
from xlsxsheet.layout import SheetFormatProps
from xlsxsheet.workbook import SheetType
from xlsxsheet.worksheet import Worksheet


@pytest.fixture
def sheet():
    return Worksheet("Sheet1", 1)


def test_write_and_read_basic_values(sheet):
    sheet.write(1, 1, "hello")
    sheet.write(1, 2, 3.5)
    sheet.write(1, 3, True)
    sheet.write(1, 4, None)
    assert sheet.read(1, 1) == "hello"
    assert sheet.read(1, 2) == 3.5
    assert sheet.read(1, 3) is True
    assert sheet.read(1, 4) is None
    assert sheet.cell_at(1, 1).cell_type is CellType.SHARED_STRING
    assert sheet.cell_at(1, 3).cell_type is CellType.BOOLEAN
    assert sheet.cell_at(1, 4) is not None and sheet.cell_at(1, 4).value is None


def test_read_missing_cell_is_none(sheet):
    assert sheet.read(5, 5) is None
    assert sheet.cell_at(5, 5) is None


def test_string_added_to_shared_strings(sheet):
    sheet.write(1, 1, "shared")
    assert sheet.workbook.shared_strings.get(sheet.workbook.shared_strings.index_of("shared")) == "shared"


def test_formula_round_trip(sheet):
    sheet.write(2, 1, "=SUM(A1:A1)")
    cell = sheet.cell_at(2, 1)
    assert cell.has_formula()
    assert cell.formula.calculate is True
    assert sheet.read(2, 1) == "=SUM(A1:A1)"


def test_shared_formula_members(sheet):
    formula = CellFormula("A1+1", FormulaType.SHARED, reference=CellRange(1, 2, 3, 2))
    sheet.write_formula(1, 2, formula)
    assert sheet.read(1, 2) == "=A1+1"
    assert sheet.read(2, 2) == "=A2+1"
    assert sheet.cell_at(3, 2).formula.shared_index == sheet.cell_at(1, 2).formula.shared_index


def test_write_out_of_range_raises(sheet):
    with pytest.raises(ValueError):
        sheet.write(0, 1, 1)
    with pytest.raises(ValueError):
        sheet.write(1, 16385, 1)


def test_write_unsupported_type_raises(sheet):
    with pytest.raises(TypeError):
        sheet.write(1, 1, object())


def test_date_round_trip(sheet):
    sheet.write(1, 1, date(2021, 3, 4))
    assert sheet.read(1, 1) == date(2021, 3, 4)
    assert sheet.cell_at(1, 1).format.number_format == sheet.workbook.default_date_format


def test_datetime_round_trip(sheet):
    moment = datetime(2021, 3, 4, 6, 30)
    sheet.write(1, 1, moment)
    assert sheet.read(1, 1) == moment


def test_time_round_trip(sheet):
    sheet.write(1, 1, time(13, 45, 10))
    assert sheet.read(1, 1) == time(13, 45, 10)
    assert sheet.cell_at(1, 1).format.number_format == "hh:mm:ss"


def test_string_to_hyperlink(sheet):
    sheet.write(1, 1, "https://example.com/page#top")
    assert sheet.read(1, 1) == "https://example.com/page#top"
    link = sheet.url_table[1][1]
    assert link.target == "https://example.com/page"
    assert link.location == "top"
    assert sheet.cell_at(1, 1).format.font_underline is FontUnderline.SINGLE


def test_mailto_display_strips_scheme(sheet):
    sheet.write_hyperlink(1, 1, "mailto:someone@example.com")
    assert sheet.read(1, 1) == "someone@example.com"
    assert sheet.url_table[1][1].target == "mailto:someone@example.com"


def test_hyperlinks_disabled_keeps_plain_string(sheet):
    sheet.workbook.strings_to_hyperlinks_enabled = False
    sheet.write(1, 1, "https://example.com")
    assert sheet.read(1, 1) == "https://example.com"
    assert sheet.url_table == {}


def test_rich_string_merges_single_fragment_format(sheet):
    sheet.write(1, 1, [("bold", Format(font_bold=True))])
    cell = sheet.cell_at(1, 1)
    assert cell.value == "bold"
    assert cell.is_rich_string()
    assert cell.format.font_bold is True


def test_inline_string(sheet):
    sheet.write_inline_string(1, 1, "inline")
    assert sheet.cell_at(1, 1).cell_type is CellType.INLINE_STRING
    assert sheet.read(1, 1) == "inline"


def test_dimension_tracks_writes(sheet):
    sheet.write(2, 3, 1)
    sheet.write(5, 1, 2)
    assert sheet.dimension() == CellRange(2, 1, 5, 3)
    assert sheet.dimension().to_string() == "A2:C5"


def test_check_dimensions(sheet):
    assert sheet.check_dimensions(1, 1) is True
    assert sheet.check_dimensions(0, 1) is False
    assert sheet.check_dimensions(1048577, 1) is False


def test_validate_dimension(sheet):
    sheet.write(1, 4, 1)
    sheet.write(3, 2, 2)
    sheet.dimension_range = CellRange()
    sheet.validate_dimension()
    assert sheet.dimension() == CellRange(1, 2, 3, 4)


def test_merge_and_unmerge(sheet):
    sheet.write(1, 1, "top")
    sheet.write(1, 2, "gone")
    sheet.merge_cells("A1:B2")
    assert sheet.read(1, 1) == "top"
    assert sheet.read(1, 2) is None
    assert sheet.cell_at(2, 2) is not None
    assert sheet.merged_cells() == [CellRange(1, 1, 2, 2)]
    sheet.unmerge_cells(CellRange(1, 1, 2, 2))
    assert sheet.merged_cells() == []
    with pytest.raises(ValueError):
        sheet.unmerge_cells("A1:B2")


def test_merge_single_cell_raises(sheet):
    with pytest.raises(ValueError):
        sheet.merge_cells("A1")


def test_merged_cells_empty_for_other_sheet_types(sheet):
    sheet.merge_cells("A1:A2")
    sheet.sheet_type = SheetType.CHART_SHEET
    assert sheet.merged_cells() == []


def test_column_width(sheet):
    sheet.set_column_width(2, 4, 20.0)
    assert sheet.column_width(3) == 20.0
    assert sheet.column_width(6) == SheetFormatProps().default_col_width


def test_column_hidden_and_format(sheet):
    fmt = Format(font_italic=True)
    sheet.set_column_hidden(1, 1, True)
    sheet.set_column_format(1, 2, fmt)
    assert sheet.is_column_hidden(1)
    assert not sheet.is_column_hidden(2)
    assert sheet.column_format(2) == fmt
    assert sheet.column_format(2).xf_index == fmt.xf_index


def test_invalid_column_range_raises(sheet):
    with pytest.raises(ValueError):
        sheet.set_column_width(5, 3, 10.0)
    with pytest.raises(ValueError):
        sheet.set_column_hidden(0, 2, True)


def test_row_height_and_hidden(sheet):
    sheet.set_row_height(2, 3, 30.0)
    sheet.set_row_hidden(4, 4, True)
    assert sheet.row_height(2) == 30.0
    assert sheet.row_height(10) == SheetFormatProps().default_row_height
    assert sheet.is_row_hidden(4)
    assert not sheet.is_row_hidden(2)


def test_row_format(sheet):
    fmt = Format(font_bold=True)
    sheet.set_row_format(1, 1, fmt)
    assert sheet.row_format(1) == fmt
    assert sheet.row_format(7).is_empty()


def test_invalid_row_range_raises(sheet):
    with pytest.raises(ValueError):
        sheet.set_row_height(0, 0, 20.0)


def test_group_rows(sheet):
    sheet.group_rows(2, 4)
    assert sheet.rows_info[3].outline_level == 1
    assert sheet.rows_info[3].hidden
    assert sheet.rows_info[5].collapsed
    assert sheet.is_row_hidden(2)


def test_group_columns(sheet):
    sheet.group_columns(2, 3)
    info = sheet.columns.info_at(2)
    assert info.outline_level == 1
    assert info.hidden
    assert sheet.columns.info_at(4).collapsed


def test_add_data_validation(sheet):
    validation = DataValidation(ValidationType.WHOLE)
    validation.add_range("A1:A5")
    sheet.add_data_validation(validation)
    assert sheet.data_validations == [validation]
    with pytest.raises(ValueError):
        sheet.add_data_validation(DataValidation(ValidationType.WHOLE))
    empty_type = DataValidation()
    empty_type.add_cell(1, 1)
    with pytest.raises(ValueError):
        sheet.add_data_validation(empty_type)


def test_set_start_page(sheet):
    sheet.set_start_page(3)
    assert sheet.page_setup["firstPageNumber"] == "3"


def test_full_cells_ordering(sheet):
    sheet.write(3, 2, "b")
    sheet.write(1, 4, "a")
    locations, max_row, max_col = sheet.full_cells()
    assert [(loc.row, loc.column) for loc in locations] == [(1, 4), (3, 2)]
    assert (max_row, max_col) == (3, 4)
    assert locations[0].cell is sheet.cell_at(1, 4)


def test_full_cells_chart_sheet_is_empty(sheet):
    sheet.write(1, 1, 1)
    sheet.sheet_type = SheetType.CHART_SHEET
    assert sheet.full_cells() == ([], -1, -1)


def test_copy(sheet):
    sheet.write(1, 1, "x")
    sheet.merge_cells("B1:C1")
    clone = sheet.copy("Copy", 2)
    assert clone.name == "Copy"
    assert clone.workbook is sheet.workbook
    assert clone.read(1, 1) == "x"
    assert clone.cell_at(1, 1) is not sheet.cell_at(1, 1)
    assert clone.cell_at(1, 1).parent is clone
    assert clone.merged_cells() == sheet.merged_cells()
    assert clone.dimension() == sheet.dimension()
    clone.write(1, 1, "changed")
    assert sheet.read(1, 1) == "x"


def test_hidden_state_from_abstract_sheet(sheet):
    sheet.set_hidden(True)
    assert sheet.is_hidden()
    sheet.set_visible(True)
    assert sheet.is_visible()