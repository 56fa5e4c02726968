"""Sample differ: compare head and tail rows of each sheet.

Samples embedded in the "after" state are used as-is; missing ones are
fetched. The "before" side is never fetched, since its data source state
is already gone: a sheet without a before-sample compares against nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sheetdiff.capture import fetch_rows, has_tail
from sheetdiff.compare import compare_row
from sheetdiff.models import SampleBuckets, SampleDiffResult
from sheetdiff.values import count_cells, row_at

if TYPE_CHECKING:
    from sheetdiff.models import (
        CellChange,
        DatasetState,
        SheetChanges,
        SheetState,
    )
    from sheetdiff.scheduler import BoundedScheduler
    from sheetdiff.transport import GridDataSource
    from sheetdiff.values import Grid


@dataclass
class _SheetSampleTally:
    head_changes: list[CellChange] = field(default_factory=list)
    tail_changes: list[CellChange] = field(default_factory=list)
    changed_rows: set[int] = field(default_factory=set)
    cells_sampled: int = 0


def _compare_window(
    sheet_title: str,
    before_rows: Grid,
    after_rows: Grid,
    row_offset: int,
    bucket: list[CellChange],
    changed_rows: set[int],
) -> None:
    for i in range(max(len(before_rows), len(after_rows))):
        comparison = compare_row(
            sheet_title, row_offset + i, row_at(before_rows, i), row_at(after_rows, i)
        )
        if comparison.changes:
            bucket.extend(comparison.changes)
            changed_rows.add(row_offset + i)


def embedded_head(sheet: SheetState, sample_size: int) -> Grid | None:
    """Head rows already held by a state, from its sample or its cells."""
    if sheet.sample is not None and sheet.sample.head_rows:
        return sheet.sample.head_rows[:sample_size]
    if sheet.cells is not None:
        return sheet.cells[:sample_size]
    return None


def embedded_tail(sheet: SheetState, sample_size: int) -> tuple[Grid, int] | None:
    """Tail rows already held by a state, with the absolute row they start at."""
    tail_start = sheet.row_count - sample_size
    sample = sheet.sample
    if sample is not None and sample.tail_rows and sample.tail_start is not None:
        skip = max(tail_start - sample.tail_start, 0)
        return sample.tail_rows[skip:], sample.tail_start + skip
    if sheet.cells is not None and len(sheet.cells) > tail_start:
        return sheet.cells[tail_start:], tail_start
    return None


class SampleDiffer:
    """Tier 2 differ over head and tail row samples."""

    def __init__(self, source: GridDataSource, scheduler: BoundedScheduler) -> None:
        self._source = source
        self._scheduler = scheduler

    async def diff(
        self,
        before: DatasetState,
        after: DatasetState,
        before_index: dict[int, SheetState],
        sample_size: int,
        sheet_changes: SheetChanges,
    ) -> SampleDiffResult:
        async def diff_sheet(sheet: SheetState) -> _SheetSampleTally:
            return await self._diff_sheet(
                after.document_id, sheet, before_index.get(sheet.sheet_id), sample_size
            )

        tallies = await self._scheduler.map(diff_sheet, after.sheets)

        samples = SampleBuckets()
        rows_changed = 0
        cells_sampled = 0
        for tally in tallies:
            samples.head_rows.extend(tally.head_changes)
            samples.tail_rows.extend(tally.tail_changes)
            rows_changed += len(tally.changed_rows)
            cells_sampled += tally.cells_sampled

        return SampleDiffResult(
            samples=samples,
            rows_changed=rows_changed,
            cells_sampled=cells_sampled,
            sheet_changes=sheet_changes,
        )

    async def _diff_sheet(
        self,
        document_id: str,
        sheet: SheetState,
        before_sheet: SheetState | None,
        sample_size: int,
    ) -> _SheetSampleTally:
        tally = _SheetSampleTally()

        after_head = embedded_head(sheet, sample_size)
        if after_head is None:
            after_head = await fetch_rows(
                self._source,
                document_id,
                sheet.title,
                0,
                min(sample_size, sheet.row_count),
            )
        before_head: Grid = ()
        if before_sheet is not None:
            before_head = embedded_head(before_sheet, sample_size) or ()

        tally.cells_sampled += count_cells(after_head)
        _compare_window(
            sheet.title,
            before_head,
            after_head,
            0,
            tally.head_changes,
            tally.changed_rows,
        )

        if not has_tail(sheet.row_count, sample_size):
            return tally

        embedded = embedded_tail(sheet, sample_size)
        if embedded is not None:
            after_tail, tail_start = embedded
        else:
            tail_start = sheet.row_count - sample_size
            after_tail = await fetch_rows(
                self._source, document_id, sheet.title, tail_start, sheet.row_count
            )
        before_tail: Grid = ()
        if before_sheet is not None:
            before_embedded = embedded_tail(before_sheet, sample_size)
            if before_embedded is not None:
                before_tail = before_embedded[0]

        tally.cells_sampled += count_cells(after_tail)
        _compare_window(
            sheet.title,
            before_tail,
            after_tail,
            tail_start,
            tally.tail_changes,
            tally.changed_rows,
        )
        return tally
