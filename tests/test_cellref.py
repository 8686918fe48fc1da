import pytest

from xlsxsheet.cellref import (
    COLUMN_MAX,
    CellRange,
    CellReference,
    column_to_letters,
    letters_to_column,
)


def test_column_letters_round_trip():
    for column in range(1, COLUMN_MAX + 1):
        assert letters_to_column(column_to_letters(column)) == column


def test_column_letters_order_by_length_then_alphabet():
    names = [column_to_letters(column) for column in range(1, 800)]
    assert names == sorted(names, key=lambda name: (len(name), name))


def test_first_cell_is_a1():
    assert CellReference(1, 1).to_string() == "A1"


@pytest.mark.parametrize("bad", [0, -3])
def test_column_to_letters_rejects_non_positive(bad):
    with pytest.raises(ValueError):
        column_to_letters(bad)


@pytest.mark.parametrize("bad", ["", "a", "A1", "$A"])
def test_letters_to_column_rejects_bad_names(bad):
    with pytest.raises(ValueError):
        letters_to_column(bad)


def test_reference_from_string():
    ref = CellReference.from_string("C12")
    assert ref == CellReference(12, letters_to_column("C"))
    assert ref.is_valid()


def test_absolute_reference_round_trip():
    ref = CellReference(42, 30)
    text = ref.to_string(row_abs=True, col_abs=True)
    assert text.count("$") == 2
    assert text.startswith("$")
    assert text.replace("$", "") == ref.to_string()
    assert CellReference.from_string(text) == ref


def test_row_only_absolute():
    ref = CellReference(42, 30)
    assert ref.to_string(row_abs=True) == column_to_letters(30) + "$42"


@pytest.mark.parametrize("text", ["", "1A", "A0", "ABCD1", "A1:B2", "a1"])
def test_invalid_reference_text(text):
    ref = CellReference.from_string(text)
    assert not ref.is_valid()
    assert ref.to_string() == ""


def test_default_range_is_invalid():
    cell_range = CellRange()
    assert not cell_range.is_valid()
    assert cell_range.to_string() == ""


def test_range_round_trip():
    cell_range = CellRange(3, 2, 17, 40)
    parsed = CellRange.from_string(cell_range.to_string())
    assert parsed == cell_range
    assert ":" in cell_range.to_string()


def test_range_counts():
    cell_range = CellRange(1, 1, 10, 10)
    assert cell_range.row_count() == 10
    assert cell_range.column_count() == 10


def test_single_cell_range_prints_as_cell():
    cell_range = CellRange.from_string("B2")
    assert cell_range.is_valid()
    assert cell_range.to_string() == CellReference.from_string("B2").to_string()
    assert cell_range.row_count() == 1 and cell_range.column_count() == 1


def test_range_corners():
    cell_range = CellRange.from_string("B3:D9")
    assert cell_range.top_left() == CellReference.from_string("B3")
    assert cell_range.bottom_right() == CellReference.from_string("D9")


@pytest.mark.parametrize("text", ["A1:B2:C3", "A1:", "X:Y", "nonsense"])
def test_bad_range_text_is_invalid(text):
    assert not CellRange.from_string(text).is_valid()


def test_inverted_range_is_invalid():
    assert not CellRange(5, 5, 2, 2).is_valid()