import xml.etree.ElementTree as ET

from xlsxsheet.cell import Cell, CellFormula, CellLocation, CellType, FormulaType
from xlsxsheet.cellref import CellRange
from xlsxsheet.format import Format


def test_formula_strips_equals_sign():
    assert CellFormula("=SUM(A1:A3)").text == "SUM(A1:A3)"


def test_formula_strips_array_braces():
    assert CellFormula("{=A1*B1}").text == "A1*B1"


def test_formula_validity():
    assert not CellFormula().is_valid()
    assert CellFormula("A1+1").is_valid()
    assert CellFormula("", FormulaType.SHARED).is_valid()


def test_shared_formula_element_round_trip():
    formula = CellFormula(
        "B1*2",
        FormulaType.SHARED,
        CellRange.from_string("C1:C9"),
        calculate=True,
        shared_index=4,
    )
    element = formula.to_element()
    assert element.get("t") == "shared"
    assert element.get("si") == str(formula.shared_index)
    assert CellFormula.from_element(element) == formula


def test_normal_formula_element_has_no_type():
    element = CellFormula("=A1+A2").to_element()
    assert element.tag == "f"
    assert "t" not in element.attrib
    assert "si" not in element.attrib
    assert element.text == "A1+A2"


def test_formula_from_xml_text():
    element = ET.fromstring('<f t="array" ref="A1:A3" ca="true">ROW(A1:A3)</f>')
    formula = CellFormula.from_element(element)
    assert formula.formula_type is FormulaType.ARRAY
    assert formula.reference == CellRange.from_string("A1:A3")
    assert formula.calculate is True
    assert formula.text == "ROW(A1:A3)"


def test_unknown_formula_type_is_normal():
    element = ET.fromstring('<f t="bogus">1</f>')
    assert CellFormula.from_element(element).formula_type is FormulaType.NORMAL


def test_cell_formula_presence():
    assert not Cell(1.0).has_formula()
    assert Cell(1.0, formula=CellFormula("=A1")).has_formula()
    assert not Cell(1.0, formula=CellFormula()).has_formula()


def test_date_time_detection():
    date_format = Format(number_format="hh:mm:ss")
    assert Cell(0.25, CellType.NUMBER, date_format).is_date_time()
    assert Cell(None, CellType.CUSTOM, date_format).is_date_time()
    assert not Cell(-1.0, CellType.NUMBER, date_format).is_date_time()
    assert not Cell(0.25, CellType.NUMBER, Format()).is_date_time()
    assert not Cell("x", CellType.STRING, date_format).is_date_time()


def test_rich_string_detection():
    plain = [("hello", Format())]
    styled = [("hello", Format(font_bold=True))]
    two = [("a", Format()), ("b", Format())]
    assert not Cell("hello", CellType.SHARED_STRING, rich_string=plain).is_rich_string()
    assert Cell("hello", CellType.SHARED_STRING, rich_string=styled).is_rich_string()
    assert Cell("ab", CellType.INLINE_STRING, rich_string=two).is_rich_string()
    assert not Cell(1.0, CellType.NUMBER, rich_string=two).is_rich_string()


def test_cell_location_holds_cell():
    cell = Cell(5.0)
    location = CellLocation(row=3, column=7, cell=cell)
    assert location.cell is cell
    assert (location.row, location.column) == (3, 7)