"""Tests for sheetdiff.utils module."""

import pytest

from sheetdiff.utils import (
    cell_to_a1,
    column_index_to_letter,
    escape_sheet_title,
    format_cell_ref,
    row_range_to_a1,
)


class TestColumnConversion:
    """Tests for column index to letter conversion."""

    def test_single_letters(self) -> None:
        assert column_index_to_letter(0) == "A"
        assert column_index_to_letter(25) == "Z"

    def test_double_letters(self) -> None:
        assert column_index_to_letter(26) == "AA"
        assert column_index_to_letter(701) == "ZZ"

    def test_triple_letters(self) -> None:
        assert column_index_to_letter(702) == "AAA"

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_index_to_letter(-1)


class TestCellConversion:
    """Tests for cell coordinate conversion."""

    def test_cell_to_a1(self) -> None:
        assert cell_to_a1(0, 0) == "A1"
        assert cell_to_a1(0, 1) == "B1"
        assert cell_to_a1(9, 2) == "C10"


class TestSheetReferences:
    """Tests for sheet-qualified references."""

    def test_plain_title_unquoted(self) -> None:
        assert escape_sheet_title("Sheet1") == "Sheet1"
        assert format_cell_ref("Sheet1", 0, 1) == "Sheet1!B1"

    def test_title_with_space_quoted(self) -> None:
        assert escape_sheet_title("My Sheet") == "'My Sheet'"

    def test_title_with_quote_escaped(self) -> None:
        assert escape_sheet_title("Bob's") == "'Bob''s'"

    def test_title_starting_with_digit_quoted(self) -> None:
        assert format_cell_ref("2024", 4, 0) == "'2024'!A5"

    def test_empty_title_gives_bare_a1(self) -> None:
        assert format_cell_ref("", 0, 0) == "A1"


class TestRowRange:
    """Tests for row range A1 notation."""

    def test_head_range(self) -> None:
        assert row_range_to_a1("Sheet1", 0, 10) == "Sheet1!A1:ZZ10"

    def test_tail_range_with_last_column(self) -> None:
        assert row_range_to_a1("My Sheet", 90, 100, "C") == "'My Sheet'!A91:C100"

    def test_empty_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            row_range_to_a1("Sheet1", 5, 5)
