"""Shared test fixtures for sheetdiff."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from sheetdiff.blocks import BlockIndex
from sheetdiff.capture import StateCapture
from sheetdiff.config import DiffEngineSettings
from sheetdiff.engine import DiffEngine
from sheetdiff.models import DatasetState, SheetSample, SheetState
from sheetdiff.scheduler import BoundedScheduler
from sheetdiff.transport import GridDataSource, SheetInfo, TransportError
from sheetdiff.values import CellValue

GOLDEN_DIR = Path(__file__).parent / "golden"


class FakeGridDataSource(GridDataSource):
    """In-memory data source that records every call.

    ``documents`` maps a document id to ``(SheetInfo, rows)`` pairs.
    Titles in ``failing_titles`` return no values, as a conforming source
    does on failure; with ``raise_on_failure`` they raise instead.
    """

    def __init__(
        self,
        documents: dict[str, list[tuple[SheetInfo, list[list[CellValue]]]]]
        | None = None,
        *,
        failing_titles: Sequence[str] = (),
        raise_on_failure: bool = False,
    ) -> None:
        self.documents = documents or {}
        self.failing_titles = set(failing_titles)
        self.raise_on_failure = raise_on_failure
        self.sheet_list_calls: list[str] = []
        self.range_calls: list[tuple[str, str, int, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def get_sheet_list(self, document_id: str) -> list[SheetInfo]:
        self.sheet_list_calls.append(document_id)
        return [info for info, _ in self.documents.get(document_id, [])]

    async def get_range_values(
        self,
        document_id: str,
        sheet_title: str,
        row_start: int,
        row_end: int,
    ) -> list[list[CellValue]]:
        self.range_calls.append((document_id, sheet_title, row_start, row_end))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # Yield so concurrent callers actually overlap.
            await asyncio.sleep(0)
            if sheet_title in self.failing_titles:
                if self.raise_on_failure:
                    raise TransportError(f"simulated failure for {sheet_title}")
                return []
            for info, rows in self.documents.get(document_id, []):
                if info.title == sheet_title:
                    return [list(row) for row in rows[row_start:row_end]]
            return []
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True

    def calls_for(self, sheet_title: str) -> list[tuple[int, int]]:
        return [(s, e) for _, t, s, e in self.range_calls if t == sheet_title]


def sheet_entry(
    sheet_id: int,
    title: str,
    rows: list[list[CellValue]],
    row_count: int | None = None,
    column_count: int | None = None,
) -> tuple[SheetInfo, list[list[CellValue]]]:
    """A FakeGridDataSource sheet whose dimensions default to its rows."""
    return (
        SheetInfo(
            sheet_id=sheet_id,
            title=title,
            row_count=len(rows) if row_count is None else row_count,
            column_count=(
                max((len(r) for r in rows), default=0)
                if column_count is None
                else column_count
            ),
        ),
        rows,
    )


def make_grid(
    row_count: int,
    column_count: int,
    value: Callable[[int, int], CellValue] = lambda r, c: r * 1000 + c,
) -> list[list[CellValue]]:
    return [[value(r, c) for c in range(column_count)] for r in range(row_count)]


@pytest.fixture
def settings() -> DiffEngineSettings:
    """Settings that ignore the environment and any .env file."""
    return DiffEngineSettings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def state_builder() -> StateBuilder:
    return StateBuilder()


class StateBuilder:
    """Builds states directly, the same way state capture does."""

    def __init__(self, block_size: int = 1000) -> None:
        self.capture = StateCapture(
            FakeGridDataSource(), BlockIndex(block_size), BoundedScheduler()
        )

    def sheet(
        self,
        sheet_id: int,
        title: str,
        cells: list[list[CellValue]] | None = None,
        *,
        row_count: int | None = None,
        column_count: int | None = None,
        head_rows: list[list[CellValue]] | None = None,
        tail_rows: list[list[CellValue]] | None = None,
        tail_start: int | None = None,
    ) -> SheetState:
        if row_count is None:
            row_count = len(cells) if cells is not None else 0
        if column_count is None:
            column_count = max((len(r) for r in cells or []), default=0)
        sample = None
        if head_rows is not None or tail_rows is not None:
            sample = SheetSample(
                head_rows=tuple(tuple(r) for r in head_rows or []),
                tail_rows=tuple(tuple(r) for r in tail_rows or []),
                tail_start=tail_start,
            )
        return self.capture.build_sheet_state(
            sheet_id, title, row_count, column_count, cells=cells, sample=sample
        )

    def state(self, document_id: str, *sheets: SheetState) -> DatasetState:
        return self.capture.build_state(document_id, list(sheets))


def make_engine(
    source: GridDataSource,
    settings: DiffEngineSettings,
    **kwargs: Any,
) -> DiffEngine:
    return DiffEngine(source, settings=settings, **kwargs)
