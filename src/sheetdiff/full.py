"""Full differ: exact cell-level diff within a cell budget.

Sheets are diffed concurrently through the bounded scheduler. Each worker
keeps its own tally; the tallies are merged in sheet order once every
worker has finished, so the change list does not depend on completion
order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sheetdiff.blocks import changed_blocks
from sheetdiff.capture import fetch_rows, full_fetch_rows
from sheetdiff.compare import compare_row
from sheetdiff.models import FullDiffResult
from sheetdiff.scheduler import CellBudget
from sheetdiff.values import row_at

if TYPE_CHECKING:
    from sheetdiff.blocks import BlockIndex
    from sheetdiff.models import (
        CellChange,
        DatasetState,
        SheetChanges,
        SheetState,
    )
    from sheetdiff.scheduler import BoundedScheduler
    from sheetdiff.transport import GridDataSource
    from sheetdiff.values import Grid

logger = logging.getLogger(__name__)


@dataclass
class SheetTally:
    """Per-worker accumulator for one sheet."""

    changes: list[CellChange] = field(default_factory=list)
    cells_added: int = 0
    cells_removed: int = 0
    cells_compared: int = 0
    blocks_skipped: int = 0


def is_unchanged(before: SheetState, after: SheetState) -> bool:
    """True when two sheets are provably identical without reading cells.

    Matching metadata digests alone say nothing about cell content, so the
    block digests must match as well.
    """
    if before is after:
        return True
    return (
        before.digest == after.digest
        and before.block_digests is not None
        and before.block_digests == after.block_digests
    )


class FullDiffer:
    """Tier 3 differ with block skipping and a shared cell budget."""

    def __init__(
        self,
        source: GridDataSource,
        block_index: BlockIndex,
        scheduler: BoundedScheduler,
    ) -> None:
        self._source = source
        self._block_index = block_index
        self._scheduler = scheduler

    async def diff(
        self,
        before: DatasetState,
        after: DatasetState,
        before_index: dict[int, SheetState],
        after_index: dict[int, SheetState],
        cell_budget: int,
        sheet_changes: SheetChanges,
    ) -> FullDiffResult:
        budget = CellBudget(cell_budget)

        async def diff_sheet(after_sheet: SheetState) -> SheetTally:
            return await self._diff_sheet(
                before.document_id,
                after.document_id,
                before_index.get(after_sheet.sheet_id),
                after_sheet,
                budget,
            )

        tallies = await self._scheduler.map(diff_sheet, after.sheets)

        changes: list[CellChange] = []
        cells_added = 0
        cells_removed = 0
        cells_compared = 0
        for tally in tallies:
            changes.extend(tally.changes)
            cells_added += tally.cells_added
            cells_removed += tally.cells_removed
            cells_compared += tally.cells_compared

        for before_sheet in before.sheets:
            if before_sheet.sheet_id not in after_index:
                cells_removed += before_sheet.cell_count

        if budget.exhausted:
            logger.debug(
                "Cell budget of %d exhausted diffing %s (%d cells compared)",
                cell_budget,
                after.document_id,
                cells_compared,
            )

        return FullDiffResult(
            changes=changes,
            cells_added=cells_added,
            cells_removed=cells_removed,
            cells_compared=cells_compared,
            sheet_changes=sheet_changes,
        )

    async def _hydrate(
        self, document_id: str, sheet: SheetState, budget: CellBudget
    ) -> Grid:
        """Cell values of a sheet, fetching a budget-bounded range if needed."""
        if sheet.cells is not None:
            return sheet.cells
        rows = max(
            full_fetch_rows(sheet.row_count, sheet.column_count, budget.remaining), 1
        )
        logger.debug(
            "Hydrating %s!1:%d of %s for full diff", sheet.title, rows, document_id
        )
        return await fetch_rows(self._source, document_id, sheet.title, 0, rows)

    async def _diff_sheet(
        self,
        before_document_id: str,
        after_document_id: str,
        before_sheet: SheetState | None,
        after_sheet: SheetState,
        budget: CellBudget,
    ) -> SheetTally:
        tally = SheetTally()
        if budget.exhausted:
            return tally

        if before_sheet is None:
            tally.cells_added += after_sheet.cell_count
            return tally

        if is_unchanged(before_sheet, after_sheet):
            return tally

        after_values = await self._hydrate(after_document_id, after_sheet, budget)
        before_values = await self._hydrate(before_document_id, before_sheet, budget)

        # None means no usable index: every block is compared.
        changed = changed_blocks(before_sheet.block_digests, after_sheet.block_digests)
        row_count = max(len(before_values), len(after_values))

        for block, rows in self._block_index.iter_blocks(row_count):
            if budget.exhausted:
                break

            block_cells = 0
            if changed is not None and block not in changed:
                for row in rows:
                    block_cells += max(
                        len(row_at(before_values, row)), len(row_at(after_values, row))
                    )
                tally.blocks_skipped += 1
            else:
                for row in rows:
                    comparison = compare_row(
                        after_sheet.title,
                        row,
                        row_at(before_values, row),
                        row_at(after_values, row),
                    )
                    tally.changes.extend(comparison.changes)
                    tally.cells_added += comparison.cells_added
                    tally.cells_removed += comparison.cells_removed
                    block_cells += comparison.cells_compared

            tally.cells_compared += block_cells
            budget.consume(block_cells)

        logger.debug(
            "Diffed sheet %s: %d change(s), %d cell(s) compared, %d block(s) skipped",
            after_sheet.title,
            len(tally.changes),
            tally.cells_compared,
            tally.blocks_skipped,
        )
        return tally
