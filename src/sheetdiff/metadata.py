"""Metadata differ: the cheapest tier, dimensions and sheet lists only."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from sheetdiff.models import MetadataDiffResult, StateSummary

if TYPE_CHECKING:
    from sheetdiff.models import DatasetState, SheetChanges

# Share of cells assumed changed when the structure differs but the sheet
# count does not. An approximation, not a measurement.
ESTIMATED_CHANGE_RATIO = 0.1


def estimate_changed_cells(before: DatasetState, after: DatasetState) -> int:
    """Rough count of changed cells, derived from metadata alone."""
    if before.digest == after.digest:
        return 0

    total_cells = after.total_cells
    if len(before.sheets) != len(after.sheets):
        return total_cells
    return math.ceil(total_cells * ESTIMATED_CHANGE_RATIO)


def _summarize(state: DatasetState) -> StateSummary:
    return StateSummary(
        captured_at=state.captured_at,
        row_count=state.total_rows,
        column_count=state.total_columns,
        digest=state.digest,
    )


def metadata_diff(
    before: DatasetState,
    after: DatasetState,
    sheet_changes: SheetChanges,
) -> MetadataDiffResult:
    """Compare two states by dimensions and digest only."""
    before_summary = _summarize(before)
    after_summary = _summarize(after)
    return MetadataDiffResult(
        before=before_summary,
        after=after_summary,
        rows_changed=abs(after_summary.row_count - before_summary.row_count),
        columns_changed=abs(after_summary.column_count - before_summary.column_count),
        estimated_cells_changed=estimate_changed_cells(before, after),
        sheet_changes=sheet_changes,
    )
