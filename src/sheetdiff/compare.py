"""Cell-by-cell comparison of two rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sheetdiff.models import CellChange
from sheetdiff.utils import format_cell_ref
from sheetdiff.values import MISSING, values_equal

if TYPE_CHECKING:
    from sheetdiff.models import ChangeKind
    from sheetdiff.values import Row


@dataclass
class RowComparison:
    """Changes found in one row and the cells it took to find them."""

    changes: list[CellChange] = field(default_factory=list)
    cells_added: int = 0
    cells_removed: int = 0
    cells_compared: int = 0


def compare_row(
    sheet_title: str,
    row_index: int,
    before_row: Row,
    after_row: Row,
) -> RowComparison:
    """Compare two rows position by position.

    A cell missing on one side is an addition or removal, never a value
    change with an empty endpoint.
    """
    result = RowComparison()
    width = max(len(before_row), len(after_row))
    for col in range(width):
        kind: ChangeKind
        before = before_row[col] if col < len(before_row) else MISSING
        after = after_row[col] if col < len(after_row) else MISSING

        if before is MISSING:
            result.cells_added += 1
            kind = "added"
        elif after is MISSING:
            result.cells_removed += 1
            kind = "removed"
        elif values_equal(before, after):
            continue
        else:
            kind = "value"

        result.changes.append(
            CellChange(
                cell=format_cell_ref(sheet_title, row_index, col),
                before=before,
                after=after,
                kind=kind,
            )
        )
    result.cells_compared = width
    return result
