"""
Google Sheets API Types

The subset of Google Sheets API v4 resources that state capture reads.
Field names follow the API's camelCase JSON.

These TypedDict classes provide static type checking for API response
objects without runtime overhead.
"""

from __future__ import annotations

from typing import Any, TypedDict


class GridProperties(TypedDict, total=False):
    """Properties of a grid."""

    # The number of columns in the grid.
    columnCount: int

    # The number of rows in the grid.
    rowCount: int

    # The number of rows that are frozen in the grid.
    frozenRowCount: int

    # The number of columns that are frozen in the grid.
    frozenColumnCount: int


class SheetProperties(TypedDict, total=False):
    """Properties of a sheet."""

    # Additional properties of the sheet if this sheet is a grid.
    gridProperties: GridProperties

    # True if the sheet is hidden in the UI, false if it's visible.
    hidden: bool

    # The index of the sheet within the spreadsheet.
    index: int

    # The ID of the sheet. Must be non-negative. This field cannot be changed once set.
    sheetId: int

    # The type of sheet. Defaults to GRID.
    sheetType: str

    # The name of the sheet.
    title: str


class ExtendedValue(TypedDict, total=False):
    """The kinds of value that a cell in a spreadsheet can have."""

    # Represents a boolean value.
    boolValue: bool

    # Represents an error. This field is read-only.
    errorValue: dict[str, Any]

    # Represents a formula.
    formulaValue: str

    # Represents a double value.
    numberValue: float

    # Represents a string value. Leading single quotes are not included.
    stringValue: str


class CellData(TypedDict, total=False):
    """Data about a specific cell."""

    # The effective value of the cell. For cells with formulas, this is the calculated value.
    effectiveValue: ExtendedValue

    # The formatted value of the cell, as shown to the user.
    formattedValue: str

    # The value the user entered in the cell.
    userEnteredValue: ExtendedValue

    # Any note on the cell.
    note: str


class RowData(TypedDict, total=False):
    """Data about each cell in a row."""

    # The values in the row, one per column.
    values: list[CellData]


class GridData(TypedDict, total=False):
    """Data in the grid, as well as metadata about the dimensions."""

    # The data in the grid, one entry per row.
    rowData: list[RowData]

    # The first column this GridData refers to, zero-based.
    startColumn: int

    # The first row this GridData refers to, zero-based.
    startRow: int


class Sheet(TypedDict, total=False):
    """A sheet in a spreadsheet."""

    # Data in the grid, if this is a grid sheet.
    data: list[GridData]

    # The properties of the sheet.
    properties: SheetProperties


class SpreadsheetProperties(TypedDict, total=False):
    """Properties of a spreadsheet."""

    # The title of the spreadsheet.
    title: str


class Spreadsheet(TypedDict, total=False):
    """Resource that represents a spreadsheet."""

    # Overall properties of a spreadsheet.
    properties: SpreadsheetProperties

    # The sheets that are part of a spreadsheet.
    sheets: list[Sheet]

    # The ID of the spreadsheet. This field is read-only.
    spreadsheetId: str


class BatchUpdateSpreadsheetResponse(TypedDict, total=False):
    """The reply for batch updating a spreadsheet."""

    # The reply of the updates.
    replies: list[dict[str, Any]]

    # The spreadsheet the updates were applied to.
    spreadsheetId: str

    # The spreadsheet after updates were applied. Only set if includeSpreadsheetInResponse is true.
    updatedSpreadsheet: Spreadsheet


class ValueRange(TypedDict, total=False):
    """Data within a range of the spreadsheet."""

    # The major dimension of the values. ROWS or COLUMNS.
    majorDimension: str

    # The range the values cover, in A1 notation.
    range: str

    # The data that was read or to be written, one list per row.
    values: list[list[Any]]


class UpdateValuesResponse(TypedDict, total=False):
    """The response when updating a range of values in a spreadsheet."""

    # The spreadsheet the updates were applied to.
    spreadsheetId: str

    # The number of cells updated.
    updatedCells: int

    # The values of the cells after updates were applied. Only set if includeValuesInResponse is true.
    updatedData: ValueRange

    # The range (in A1 notation) that updates were applied to.
    updatedRange: str
