import xml.etree.ElementTree as ET

import pytest

from xlsxsheet.cellref import CellRange, CellReference
from xlsxsheet.datavalidation import (
    DataValidation,
    ErrorStyle,
    ValidationOperator,
    ValidationType,
)


def test_defaults():
    dv = DataValidation()
    assert dv.validation_type is ValidationType.NONE
    assert dv.validation_operator is ValidationOperator.BETWEEN
    assert dv.error_style is ErrorStyle.STOP
    assert dv.prompt_message_visible is True
    assert dv.error_message_visible is True
    assert dv.allow_blank is False
    assert dv.ranges == []


def test_add_cell_by_numbers_and_reference():
    dv = DataValidation()
    dv.add_cell(3, 2)
    dv.add_cell(CellReference(5, 4))
    assert dv.ranges == [CellRange(3, 2, 3, 2), CellRange(5, 4, 5, 4)]


def test_add_cell_requires_column():
    with pytest.raises(TypeError):
        DataValidation().add_cell(3)


def test_add_range_from_text_and_object():
    dv = DataValidation()
    dv.add_range("B2:C5")
    dv.add_range(CellRange(1, 1, 2, 2))
    assert dv.ranges == [CellRange(2, 2, 5, 3), CellRange(1, 1, 2, 2)]


def test_messages_set_text_and_title():
    dv = DataValidation()
    dv.set_error_message("Bad value", "Oops")
    dv.set_prompt_message("Enter a number")
    assert (dv.error_message, dv.error_message_title) == ("Bad value", "Oops")
    assert (dv.prompt_message, dv.prompt_message_title) == ("Enter a number", "")


def test_default_element_omits_default_attributes():
    element = DataValidation().to_element()
    assert element.tag == "dataValidation"
    assert "type" not in element.attrib
    assert "operator" not in element.attrib
    assert "errorStyle" not in element.attrib
    assert "allowBlank" not in element.attrib
    assert element.get("showInputMessage") == "1"
    assert element.get("showErrorMessage") == "1"
    assert list(element) == []


def test_element_holds_given_values():
    dv = DataValidation(ValidationType.WHOLE, ValidationOperator.GREATER_THAN, "10")
    dv.add_range("A1:A9")
    dv.add_cell(2, 3)
    element = dv.to_element()
    assert element.get("type") == ValidationType.WHOLE.value
    assert element.get("operator") == ValidationOperator.GREATER_THAN.value
    assert element.get("sqref").split() == [r.to_string() for r in dv.ranges]
    assert element.find("formula1").text == "10"
    assert element.find("formula2") is None


def test_round_trip_through_xml_text():
    dv = DataValidation(
        ValidationType.DECIMAL,
        ValidationOperator.NOT_BETWEEN,
        "1.5",
        "9.5",
        allow_blank=True,
        error_style=ErrorStyle.WARNING,
        prompt_message_visible=False,
    )
    dv.set_error_message("Out of range", "Range")
    dv.set_prompt_message("Type a decimal", "Hint")
    dv.add_range("C3:D8")
    dv.add_cell(10, 1)
    text = ET.tostring(dv.to_element())
    assert DataValidation.from_element(ET.fromstring(text)) == dv


def test_from_element_unknown_names_fall_back_to_defaults():
    element = ET.Element(
        "dataValidation", {"type": "bogus", "operator": "bogus", "errorStyle": "bogus"}
    )
    dv = DataValidation.from_element(element)
    assert dv.validation_type is ValidationType.NONE
    assert dv.validation_operator is ValidationOperator.BETWEEN
    assert dv.error_style is ErrorStyle.STOP
    assert dv.prompt_message_visible is False
    assert dv.ranges == []


@pytest.mark.parametrize("kind", list(ValidationType))
def test_every_type_round_trips(kind):
    dv = DataValidation(kind)
    dv.add_cell(1, 1)
    assert DataValidation.from_element(dv.to_element()).validation_type is kind