"""DiffEngine - main interface for sheetdiff.

Captures snapshots of a spreadsheet and diffs pairs of them at the tier
the caller asks for, downgrading when the data is too large.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sheetdiff.blocks import BlockIndex
from sheetdiff.capture import StateCapture, range_state_from_response
from sheetdiff.config import get_settings
from sheetdiff.full import FullDiffer
from sheetdiff.metadata import metadata_diff
from sheetdiff.models import DiffOptions, Tier
from sheetdiff.sampling import SampleDiffer
from sheetdiff.scheduler import BoundedScheduler
from sheetdiff.sheet_changes import detect_sheet_changes, index_sheets
from sheetdiff.tiers import select_tier

if TYPE_CHECKING:
    from sheetdiff.api_types import (
        BatchUpdateSpreadsheetResponse,
        Spreadsheet,
        ValueRange,
    )
    from sheetdiff.config import DiffEngineSettings
    from sheetdiff.models import CaptureOptions, DatasetState, DiffResult, RangeState
    from sheetdiff.transport import GridDataSource

logger = logging.getLogger(__name__)


class DiffEngine:
    """Tiered diff engine over a grid data source.

    Example:
        >>> from sheetdiff.transport import GoogleSheetsDataSource
        >>> source = GoogleSheetsDataSource(access_token="ya29...")
        >>> engine = DiffEngine(source)
        >>> before = await engine.capture_state(spreadsheet_id)
        >>> response = await apply_some_update(spreadsheet_id)
        >>> after = engine.capture_state_from_mutation(spreadsheet_id, response)
        >>> result = await engine.diff(before, after)
    """

    def __init__(
        self,
        source: GridDataSource,
        *,
        default_tier: Tier | None = None,
        sample_size: int | None = None,
        cell_budget: int | None = None,
        block_size: int | None = None,
        concurrency: int | None = None,
        settings: DiffEngineSettings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            source: Data source used for capture and on-demand fetches
            default_tier: Tier used when a call does not request one
            sample_size: Rows per head/tail sample
            cell_budget: Maximum cells a FULL capture or diff may inspect
            block_size: Rows per block in the block index
            concurrency: Maximum sheets processed at once
            settings: Fallback settings; read from the environment if omitted
        """
        settings = settings or get_settings()
        self._source = source
        self._default_tier = default_tier or settings.default_tier
        self._sample_size = sample_size or settings.sample_size
        self._cell_budget = cell_budget or settings.cell_budget

        self._block_index = BlockIndex(block_size or settings.block_size)
        scheduler = BoundedScheduler(concurrency or settings.concurrency)
        self._capture = StateCapture(source, self._block_index, scheduler)
        self._sample_differ = SampleDiffer(source, scheduler)
        self._full_differ = FullDiffer(source, self._block_index, scheduler)

    @property
    def default_tier(self) -> Tier:
        return self._default_tier

    @property
    def block_size(self) -> int:
        return self._block_index.block_size

    def _resolve(self, options: DiffOptions | None) -> tuple[Tier, int, int]:
        options = options or DiffOptions()
        return (
            options.tier or self._default_tier,
            options.sample_size or self._sample_size,
            options.cell_budget or self._cell_budget,
        )

    async def capture_state(
        self,
        document_id: str,
        options: CaptureOptions | None = None,
    ) -> DatasetState:
        """Capture current state by reading the data source.

        For write operations, prefer ``capture_state_from_mutation`` on the
        write response to avoid a redundant read.
        """
        tier, sample_size, cell_budget = self._resolve(options)
        return await self._capture.capture_from_source(
            document_id, tier, sample_size, cell_budget
        )

    def capture_state_from_mutation(
        self,
        document_id: str,
        payload: Spreadsheet | BatchUpdateSpreadsheetResponse | dict[str, Any],
        options: CaptureOptions | None = None,
    ) -> DatasetState:
        """Capture state from a write response without any fetch.

        Args:
            document_id: The spreadsheet identifier
            payload: A Spreadsheet resource, or a batchUpdate response with
                ``updatedSpreadsheet`` (request it with
                ``includeSpreadsheetInResponse``)
            options: Tier and sample size; cell budget is not used

        Returns:
            DatasetState built from the payload
        """
        tier, sample_size, _ = self._resolve(options)
        return self._capture.capture_from_mutation(
            document_id, payload, tier, sample_size
        )

    async def capture_range_state(
        self,
        document_id: str,
        sheet_title: str,
        row_start: int,
        row_end: int,
    ) -> RangeState:
        """Capture the values of zero-based rows ``[row_start, row_end)``."""
        return await self._capture.capture_range(
            document_id, sheet_title, row_start, row_end
        )

    def capture_range_state_from_response(
        self, updated_data: ValueRange | None
    ) -> RangeState:
        """Capture a range from ``UpdateValuesResponse.updatedData``, no fetch."""
        return range_state_from_response(updated_data)

    async def diff(
        self,
        before: DatasetState,
        after: DatasetState,
        options: DiffOptions | None = None,
    ) -> DiffResult:
        """Generate a diff between two states.

        Raises:
            MalformedStateError: If either state has missing or repeated sheet ids
        """
        requested, sample_size, cell_budget = self._resolve(options)

        before_index = index_sheets(before)
        after_index = index_sheets(after)
        sheet_changes = detect_sheet_changes(before, after, before_index, after_index)

        tier = select_tier(requested, before, after, cell_budget)
        if tier is Tier.FULL:
            return await self._full_differ.diff(
                before, after, before_index, after_index, cell_budget, sheet_changes
            )
        if tier is Tier.SAMPLE:
            return await self._sample_differ.diff(
                before, after, before_index, sample_size, sheet_changes
            )
        return metadata_diff(before, after, sheet_changes)
