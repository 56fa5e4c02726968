"""Tests for the metadata differ and sheet change detection."""

from __future__ import annotations

import dataclasses

import pytest

from conftest import StateBuilder
from sheetdiff.exceptions import MalformedStateError
from sheetdiff.metadata import estimate_changed_cells, metadata_diff
from sheetdiff.models import Tier
from sheetdiff.sheet_changes import detect_sheet_changes, index_sheets


class TestMetadataDiff:
    def test_identical_states_have_no_changes(
        self, state_builder: StateBuilder
    ) -> None:
        sheet = state_builder.sheet(0, "Sheet1", row_count=100, column_count=5)
        before = state_builder.state("doc", sheet)
        after = state_builder.state("doc", sheet)

        result = metadata_diff(before, after, detect_sheet_changes(before, after))

        assert result.tier is Tier.METADATA
        assert result.rows_changed == 0
        assert result.columns_changed == 0
        assert result.estimated_cells_changed == 0
        assert not result.has_changes()

    def test_row_growth_is_estimated(self, state_builder: StateBuilder) -> None:
        before = state_builder.state(
            "doc", state_builder.sheet(0, "Sheet1", row_count=100, column_count=5)
        )
        after = state_builder.state(
            "doc", state_builder.sheet(0, "Sheet1", row_count=120, column_count=5)
        )

        result = metadata_diff(before, after, detect_sheet_changes(before, after))

        assert result.rows_changed == 20
        assert result.columns_changed == 0
        # 10% of the 600 cells after the change
        assert result.estimated_cells_changed == 60
        assert result.before.row_count == 100
        assert result.after.row_count == 120
        assert result.has_changes()

    def test_estimate_rounds_up(self, state_builder: StateBuilder) -> None:
        before = state_builder.state(
            "doc", state_builder.sheet(0, "Sheet1", row_count=1, column_count=1)
        )
        after = state_builder.state(
            "doc", state_builder.sheet(0, "Sheet1", row_count=3, column_count=1)
        )
        assert estimate_changed_cells(before, after) == 1

    def test_sheet_count_change_counts_every_cell(
        self, state_builder: StateBuilder
    ) -> None:
        first = state_builder.sheet(0, "Sheet1", row_count=10, column_count=2)
        second = state_builder.sheet(1, "Sheet2", row_count=5, column_count=4)
        before = state_builder.state("doc", first)
        after = state_builder.state("doc", first, second)

        result = metadata_diff(before, after, detect_sheet_changes(before, after))

        assert result.estimated_cells_changed == 40
        assert [s.title for s in result.sheet_changes.sheets_added] == ["Sheet2"]

    def test_summaries_total_across_sheets(self, state_builder: StateBuilder) -> None:
        state = state_builder.state(
            "doc",
            state_builder.sheet(0, "A", row_count=10, column_count=2),
            state_builder.sheet(1, "B", row_count=5, column_count=3),
        )

        result = metadata_diff(state, state, detect_sheet_changes(state, state))

        assert result.after.row_count == 15
        assert result.after.column_count == 5
        assert result.after.digest == state.digest

    def test_to_dict_shape(self, state_builder: StateBuilder) -> None:
        state = state_builder.state(
            "doc", state_builder.sheet(0, "Sheet1", row_count=2, column_count=2)
        )
        data = metadata_diff(state, state, detect_sheet_changes(state, state)).to_dict()

        assert data["tier"] == "METADATA"
        assert set(data["before"]) == {
            "timestamp",
            "rowCount",
            "columnCount",
            "checksum",
        }
        assert data["summary"] == {
            "rowsChanged": 0,
            "columnsChanged": 0,
            "estimatedCellsChanged": 0,
        }
        assert data["sheetChanges"] == {
            "sheetsAdded": [],
            "sheetsRemoved": [],
            "sheetsRenamed": [],
        }


class TestSheetChanges:
    def test_rename_detected_by_id(self, state_builder: StateBuilder) -> None:
        before = state_builder.state("doc", state_builder.sheet(42, "Summary"))
        after = state_builder.state("doc", state_builder.sheet(42, "Totals"))

        changes = detect_sheet_changes(before, after)

        assert changes.sheets_added == []
        assert changes.sheets_removed == []
        renamed = changes.sheets_renamed
        assert [(r.sheet_id, r.old_title, r.new_title) for r in renamed] == [
            (42, "Summary", "Totals")
        ]

    def test_same_title_new_id_is_add_and_remove(
        self, state_builder: StateBuilder
    ) -> None:
        before = state_builder.state("doc", state_builder.sheet(1, "Data"))
        after = state_builder.state("doc", state_builder.sheet(2, "Data"))

        changes = detect_sheet_changes(before, after)

        assert [(s.sheet_id, s.title) for s in changes.sheets_added] == [(2, "Data")]
        assert [(s.sheet_id, s.title) for s in changes.sheets_removed] == [(1, "Data")]
        assert changes.sheets_renamed == []

    def test_order_follows_states(self, state_builder: StateBuilder) -> None:
        before = state_builder.state(
            "doc", state_builder.sheet(5, "E"), state_builder.sheet(3, "C")
        )
        after = state_builder.state(
            "doc", state_builder.sheet(9, "I"), state_builder.sheet(7, "G")
        )

        changes = detect_sheet_changes(before, after)

        assert [s.sheet_id for s in changes.sheets_added] == [9, 7]
        assert [s.sheet_id for s in changes.sheets_removed] == [5, 3]

    def test_duplicate_sheet_id_is_malformed(self, state_builder: StateBuilder) -> None:
        state = state_builder.state(
            "doc", state_builder.sheet(1, "A"), state_builder.sheet(1, "B")
        )
        with pytest.raises(MalformedStateError, match="more than once"):
            index_sheets(state)

    def test_missing_sheet_id_is_malformed(self, state_builder: StateBuilder) -> None:
        sheet = dataclasses.replace(state_builder.sheet(1, "A"), sheet_id=None)
        state = state_builder.state("doc", sheet)

        with pytest.raises(MalformedStateError) as exc_info:
            index_sheets(state)
        assert exc_info.value.document_id == "doc"
