"""State capture: build immutable snapshots of a spreadsheet.

Snapshots come either from the data source (one sheet-list read plus
bounded row reads per sheet) or from the payload a write operation already
returned, which avoids a second read round-trip.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sheetdiff.hashing import content_digest
from sheetdiff.models import DatasetState, RangeState, SheetSample, SheetState, Tier
from sheetdiff.transport import TransportError
from sheetdiff.values import freeze_grid, grid_to_json

if TYPE_CHECKING:
    from sheetdiff.api_types import (
        BatchUpdateSpreadsheetResponse,
        CellData,
        Sheet,
        Spreadsheet,
        ValueRange,
    )
    from sheetdiff.blocks import BlockIndex
    from sheetdiff.models import FrozenGrid
    from sheetdiff.scheduler import BoundedScheduler
    from sheetdiff.transport import GridDataSource, SheetInfo
    from sheetdiff.values import CellValue, Grid

logger = logging.getLogger(__name__)


def sheet_digest(sheet_id: int, title: str, row_count: int, column_count: int) -> str:
    """Digest of a sheet's identity and dimensions."""
    return content_digest([sheet_id, title, row_count, column_count])


def state_digest(sheets: tuple[SheetState, ...]) -> str:
    """Digest of the ordered sheet metadata of a snapshot, never cell content."""
    return content_digest(
        [
            {
                "id": s.sheet_id,
                "title": s.title,
                "rows": s.row_count,
                "cols": s.column_count,
            }
            for s in sheets
        ]
    )


def has_tail(row_count: int, sample_size: int) -> bool:
    """Whether a tail sample is taken; head and tail would overlap otherwise."""
    return row_count > sample_size * 2


def trim_grid(grid: Grid) -> list[list[CellValue]]:
    """Drop trailing empty cells and rows, matching what values.get returns."""
    rows: list[list[CellValue]] = []
    for row in grid:
        cells = list(row)
        while cells and cells[-1] is None:
            cells.pop()
        rows.append(cells)
    while rows and not rows[-1]:
        rows.pop()
    return rows


def cell_data_value(cell: CellData) -> CellValue:
    """Raw value of a CellData: effective value first, then formatted text."""
    effective = cell.get("effectiveValue") or {}
    for key in ("numberValue", "stringValue", "boolValue"):
        if key in effective:
            value: CellValue = effective[key]  # type: ignore[literal-required]
            return value
    return cell.get("formattedValue")


def sheet_grid_values(sheet: Sheet) -> list[list[CellValue]] | None:
    """Extract cell values from a sheet's first GridData, if it has any."""
    data = sheet.get("data")
    if not data:
        return None
    row_data = data[0].get("rowData", [])
    return trim_grid(
        [[cell_data_value(cell) for cell in row.get("values", [])] for row in row_data]
    )


async def fetch_rows(
    source: GridDataSource,
    document_id: str,
    sheet_title: str,
    row_start: int,
    row_end: int,
) -> list[list[CellValue]]:
    """Read rows through the data source, never raising on fetch failure."""
    if row_end <= row_start:
        return []
    try:
        return await source.get_range_values(
            document_id, sheet_title, row_start, row_end
        )
    except TransportError as e:
        logger.warning(
            "Range fetch failed for %s!%d:%d in %s: %s",
            sheet_title,
            row_start,
            row_end,
            document_id,
            e,
        )
        return []


def full_fetch_rows(row_count: int, column_count: int, cell_budget: int) -> int:
    """Rows to read so that rows x columns stays within the cell budget."""
    return min(row_count, cell_budget // max(column_count, 1))


class StateCapture:
    """Builds DatasetState snapshots for one data source."""

    def __init__(
        self,
        source: GridDataSource,
        block_index: BlockIndex,
        scheduler: BoundedScheduler,
    ) -> None:
        self._source = source
        self._block_index = block_index
        self._scheduler = scheduler

    def build_sheet_state(
        self,
        sheet_id: int,
        title: str,
        row_count: int,
        column_count: int,
        *,
        cells: Grid | None = None,
        sample: SheetSample | None = None,
    ) -> SheetState:
        """Assemble a SheetState, indexing blocks whenever cells are present."""
        frozen_cells: FrozenGrid | None = None
        block_digests: tuple[str, ...] | None = None
        if cells is not None:
            frozen_cells = freeze_grid(cells)
            block_digests = self._block_index.compute_digests(frozen_cells)
        return SheetState(
            sheet_id=sheet_id,
            title=title,
            row_count=row_count,
            column_count=column_count,
            digest=sheet_digest(sheet_id, title, row_count, column_count),
            block_digests=block_digests,
            sample=sample if sample is not None and not sample.is_empty() else None,
            cells=frozen_cells,
        )

    def build_state(
        self, document_id: str, sheets: list[SheetState] | tuple[SheetState, ...]
    ) -> DatasetState:
        frozen = tuple(sheets)
        return DatasetState(
            document_id=document_id,
            captured_at=datetime.now(timezone.utc),
            sheets=frozen,
            digest=state_digest(frozen),
        )

    async def capture_from_source(
        self,
        document_id: str,
        tier: Tier,
        sample_size: int,
        cell_budget: int,
    ) -> DatasetState:
        """Capture a snapshot by reading the data source.

        METADATA reads the sheet list only. SAMPLE adds head and tail rows
        per sheet. FULL reads up to ``cell_budget`` cells per sheet and takes
        the head sample from those rows.
        """
        try:
            sheet_infos = await self._source.get_sheet_list(document_id)
        except TransportError as e:
            logger.warning("Sheet list fetch failed for %s: %s", document_id, e)
            sheet_infos = []

        async def capture_sheet(info: SheetInfo) -> SheetState:
            return await self._capture_sheet(
                document_id, info, tier, sample_size, cell_budget
            )

        sheets = await self._scheduler.map(capture_sheet, sheet_infos)
        logger.debug(
            "Captured %d sheet(s) of %s at tier %s",
            len(sheets),
            document_id,
            tier.value,
        )
        return self.build_state(document_id, sheets)

    async def _capture_sheet(
        self,
        document_id: str,
        info: SheetInfo,
        tier: Tier,
        sample_size: int,
        cell_budget: int,
    ) -> SheetState:
        if tier is Tier.METADATA or info.row_count == 0:
            return self.build_sheet_state(
                info.sheet_id,
                info.title,
                info.row_count,
                info.column_count,
                cells=[] if tier is Tier.FULL else None,
            )

        full_rows = 0
        if tier is Tier.FULL:
            full_rows = full_fetch_rows(info.row_count, info.column_count, cell_budget)
            head_fetch = fetch_rows(
                self._source, document_id, info.title, 0, full_rows
            )
        else:
            head_fetch = fetch_rows(
                self._source,
                document_id,
                info.title,
                0,
                min(sample_size, info.row_count),
            )

        tail_start = info.row_count - sample_size
        if has_tail(info.row_count, sample_size) and full_rows < info.row_count:
            tail_fetch = fetch_rows(
                self._source, document_id, info.title, tail_start, info.row_count
            )
        else:
            tail_fetch = _no_rows()

        head_rows, tail_rows = await asyncio.gather(head_fetch, tail_fetch)

        cells: list[list[CellValue]] | None = None
        if tier is Tier.FULL:
            # An empty read of a non-empty sheet leaves its content unknown,
            # so no cells and no block index are recorded.
            cells = head_rows or None
            if cells is not None:
                if has_tail(info.row_count, sample_size) and not tail_rows:
                    tail_rows = cells[tail_start:] if len(cells) > tail_start else []
                head_rows = cells[:sample_size]

        return self.build_sheet_state(
            info.sheet_id,
            info.title,
            info.row_count,
            info.column_count,
            cells=cells,
            sample=SheetSample(
                head_rows=freeze_grid(head_rows),
                tail_rows=freeze_grid(tail_rows),
                tail_start=tail_start if tail_rows else None,
            ),
        )

    def capture_from_mutation(
        self,
        document_id: str,
        payload: Spreadsheet | BatchUpdateSpreadsheetResponse | dict[str, Any],
        tier: Tier,
        sample_size: int,
    ) -> DatasetState:
        """Capture a snapshot from a write response without any fetch.

        Accepts a Spreadsheet resource (spreadsheets.get) or a batchUpdate
        response with ``updatedSpreadsheet``. Cell values are read from grid
        data when the payload includes it.
        """
        spreadsheet: Spreadsheet = payload.get("updatedSpreadsheet", payload)  # type: ignore[assignment]

        sheets: list[SheetState] = []
        for sheet in spreadsheet.get("sheets", []):
            props = sheet.get("properties")
            if not props:
                continue
            grid_props = props.get("gridProperties", {})
            sheet_id = props.get("sheetId", 0)
            title = props.get("title", "")
            row_count = grid_props.get("rowCount", 0)
            column_count = grid_props.get("columnCount", 0)

            values = sheet_grid_values(sheet) if tier is not Tier.METADATA else None
            cells: list[list[CellValue]] | None = None
            sample: SheetSample | None = None
            if values is not None and tier is Tier.FULL:
                cells = values
            elif values is not None and tier is Tier.SAMPLE:
                tail: list[list[CellValue]] = []
                tail_start = max(0, row_count - sample_size)
                if has_tail(row_count, sample_size):
                    tail = values[tail_start:]
                sample = SheetSample(
                    head_rows=freeze_grid(values[:sample_size]),
                    tail_rows=freeze_grid(tail),
                    tail_start=tail_start if tail else None,
                )

            sheets.append(
                self.build_sheet_state(
                    sheet_id, title, row_count, column_count, cells=cells, sample=sample
                )
            )

        return self.build_state(document_id, sheets)

    async def capture_range(
        self,
        document_id: str,
        sheet_title: str,
        row_start: int,
        row_end: int,
    ) -> RangeState:
        """Capture the values of one row range by reading the data source."""
        values = await fetch_rows(
            self._source, document_id, sheet_title, row_start, row_end
        )
        return range_state(values)


def range_state(values: Grid) -> RangeState:
    frozen = freeze_grid(values)
    return RangeState(
        digest=content_digest(grid_to_json(frozen)),
        row_count=len(frozen),
        values=frozen,
    )


def range_state_from_response(updated_data: ValueRange | None) -> RangeState:
    """Capture a range from ``UpdateValuesResponse.updatedData`` without a fetch."""
    values = (updated_data or {}).get("values", [])
    return range_state(values)


async def _no_rows() -> list[list[CellValue]]:
    return []
