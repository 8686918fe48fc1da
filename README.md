# xlsxsheet

A pure-Python model of a single worksheet in the Office Open XML spreadsheet
format (`.xlsx`). It keeps cells, formulas, formats, merged ranges, row and
column layout, hyperlinks, data validations and page settings, and converts a
sheet to and from its `sheetN.xml` part. It has no dependencies outside the
standard library.

## Installing

```
pip install .
```

Tests run with `pip install .[test]` followed by `pytest`.

## Cell addresses

```python
from xlsxsheet.cellref import CellReference, CellRange, column_to_letters

ref = CellReference.from_string("B3")
ref.to_string()                                  # "B3"
ref.to_string(row_abs=True, col_abs=True)        # "$B$3"
CellRange.from_string("A1:C4").row_count()       # 4
column_to_letters(28)                            # "AB"
```

Text that cannot be parsed gives an invalid reference or range
(`is_valid()` is false) rather than an error.

## Working with a sheet

```python
import datetime
from xlsxsheet.worksheet import Worksheet

sheet = Worksheet("Sheet1")
sheet.write(1, 1, "Name")
sheet.write(1, 2, 42)
sheet.write(2, 1, "=SUM(B1:B1)")
sheet.write(3, 1, datetime.date(2024, 1, 31))
sheet.merge_cells("A5:C5")
sheet.set_column_width(1, 3, 18.0)
sheet.set_row_height(1, 1, 20.0)
sheet.group_rows(6, 8)

sheet.read(1, 2)        # 42.0
sheet.read(2, 1)        # "=SUM(B1:B1)"
sheet.read(3, 1)        # datetime.date(2024, 1, 31)
sheet.dimension()       # CellRange covering every written cell
```

`write` picks the cell kind from the Python type: `None` gives a blank cell,
strings starting with `=` become formulas, strings that look like links
(`http://`, `https://`, `ftp://`, `mailto:`, `file://`) become hyperlinks,
lists of `(text, Format)` pairs become rich strings, and `bool`, numbers,
`datetime`, `date` and `time` each have their own writer (`write_bool`,
`write_numeric`, `write_datetime`, `write_date`, `write_time`). Shared
formulas written with `write_formula` are read back shifted to each cell of
their range.

Rows and columns are 1-based. Writing outside the sheet limits, merging a
single cell, unmerging a range that is not merged, or giving an invalid row or
column range raises `ValueError`; writing a value of an unsupported type
raises `TypeError`.

Formats are built from keyword properties:

```python
from xlsxsheet.format import Format, HorizontalAlignment

bold = Format(font_bold=True, horizontal_alignment=HorizontalAlignment.CENTER)
sheet.write(1, 1, "Title", bold)
```

Data validations come from `xlsxsheet.datavalidation`:

```python
from xlsxsheet.datavalidation import DataValidation, ValidationType

rule = DataValidation(ValidationType.LIST, formula1='"yes,no"')
rule.add_range("D1:D10")
sheet.add_data_validation(rule)
```

## Sheet XML

```python
from xlsxsheet.sheetwriter import save_worksheet
from xlsxsheet.sheetreader import load_worksheet

xml_bytes = save_worksheet(sheet)

restored = Worksheet("Sheet1", workbook=sheet.workbook)
load_worksheet(restored, xml_bytes)
```

`save_worksheet` rebuilds the sheet's `relationships` (hyperlink and drawing
targets) while writing. `load_worksheet` resolves hyperlink and drawing
targets through `sheet.relationships`, which should be loaded first with
`Relationships.from_xml`; shared-string and style indexes are looked up in the
sheet's `Workbook`. Malformed XML raises `ValueError`.

## Package parts

`xlsxsheet.zipio` offers `ZipReader` and `ZipWriter` for reading and writing
the files of a zip container, and `xlsxsheet.relationships` reads and writes
the `.rels` parts that link them. `xlsxsheet.dates` converts between Python
dates and spreadsheet serial day numbers (1900 and 1904 systems).

## What it does not do

This package works on one worksheet part at a time. It does not assemble or
open a whole `.xlsx` file: there is no writer or reader for the workbook part,
the shared-string table, the style sheet, content types or document
properties. `Workbook`, `SharedStrings` and `Styles` exist only in memory to
support the sheet. Charts, images, conditional formatting and chart sheets are
not supported; a drawing reference on a loaded sheet is kept only as a path.
There is no command-line tool.