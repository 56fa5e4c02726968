"""
Utility functions for sheetdiff.

Provides A1 notation helpers for cell references and range strings.
"""

from __future__ import annotations

# The Sheets API accepts columns up to ZZZ; samples read up to ZZ like the UI.
MAX_SAMPLE_COLUMN = "ZZ"


def column_index_to_letter(index: int) -> str:
    """Convert a zero-based column index to A1 notation letter(s).

    Examples:
        0 -> A, 1 -> B, 25 -> Z, 26 -> AA, 27 -> AB, 702 -> AAA
    """
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")
    result = ""
    while True:
        result = chr(ord("A") + (index % 26)) + result
        index = index // 26 - 1
        if index < 0:
            break
    return result


def cell_to_a1(row_index: int, col_index: int) -> str:
    """Convert zero-based row and column indices to A1 notation.

    Examples:
        (0, 0) -> A1, (0, 1) -> B1, (9, 2) -> C10
    """
    return f"{column_index_to_letter(col_index)}{row_index + 1}"


def escape_sheet_title(title: str) -> str:
    """Escape sheet title for use in A1 notation ranges.

    Sheet names containing spaces, special characters, or starting with
    digits need to be wrapped in single quotes.
    """
    needs_quoting = (
        " " in title
        or "'" in title
        or "!" in title
        or ":" in title
        or (len(title) > 0 and title[0].isdigit())
    )
    if needs_quoting:
        escaped = title.replace("'", "''")
        return f"'{escaped}'"
    return title


def format_cell_ref(sheet_title: str, row_index: int, col_index: int) -> str:
    """Return a sheet-qualified A1 reference such as ``Sheet1!B1``."""
    a1 = cell_to_a1(row_index, col_index)
    if not sheet_title:
        return a1
    return f"{escape_sheet_title(sheet_title)}!{a1}"


def row_range_to_a1(
    sheet_title: str,
    row_start: int,
    row_end: int,
    last_column: str = MAX_SAMPLE_COLUMN,
) -> str:
    """Build an A1 range covering zero-based rows ``[row_start, row_end)``.

    Examples:
        ("Sheet1", 0, 10) -> Sheet1!A1:ZZ10
        ("My Sheet", 90, 100, "C") -> 'My Sheet'!A91:C100
    """
    if row_end <= row_start:
        raise ValueError(f"Empty row range: [{row_start}, {row_end})")
    return (
        f"{escape_sheet_title(sheet_title)}!A{row_start + 1}:{last_column}{row_end}"
    )
