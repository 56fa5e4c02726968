"""Value objects shared by state capture and the differs.

Snapshots (DatasetState, SheetState) are frozen and hold tuples so they
can be handed to concurrent differs without copying. Results are plain
dataclasses built once per diff call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - used at runtime
from enum import Enum
from typing import Any, Literal, Union

from sheetdiff.values import MISSING, CellValue, MaybeCell


class Tier(str, Enum):
    """Diff fidelity, cheapest first."""

    METADATA = "METADATA"
    SAMPLE = "SAMPLE"
    FULL = "FULL"


FrozenGrid = tuple[tuple[CellValue, ...], ...]


@dataclass(frozen=True)
class SheetSample:
    """Rows taken from the start and end of a sheet.

    ``tail_start`` is the absolute row index of the first tail row.
    """

    head_rows: FrozenGrid = ()
    tail_rows: FrozenGrid = ()
    tail_start: int | None = None

    def is_empty(self) -> bool:
        return not self.head_rows and not self.tail_rows


@dataclass(frozen=True)
class SheetState:
    """One sheet within a snapshot."""

    sheet_id: int
    title: str
    row_count: int
    column_count: int
    digest: str  # metadata only: id, title, dimensions
    block_digests: tuple[str, ...] | None = None
    sample: SheetSample | None = None
    cells: FrozenGrid | None = None

    @property
    def cell_count(self) -> int:
        return self.row_count * self.column_count

    @property
    def has_cells(self) -> bool:
        return self.cells is not None


@dataclass(frozen=True)
class DatasetState:
    """Immutable snapshot of a document at a point in time."""

    document_id: str
    captured_at: datetime
    sheets: tuple[SheetState, ...]
    digest: str  # over sheet metadata, never cell content

    @property
    def total_rows(self) -> int:
        return sum(s.row_count for s in self.sheets)

    @property
    def total_columns(self) -> int:
        return sum(s.column_count for s in self.sheets)

    @property
    def total_cells(self) -> int:
        return sum(s.cell_count for s in self.sheets)


@dataclass(frozen=True)
class RangeState:
    """Snapshot of a single range of values."""

    digest: str
    row_count: int
    values: FrozenGrid


@dataclass(frozen=True)
class DiffOptions:
    """Per-call options. Unset fields fall back to engine defaults."""

    tier: Tier | None = None
    sample_size: int | None = None
    cell_budget: int | None = None

    def __post_init__(self) -> None:
        if self.sample_size is not None and self.sample_size < 1:
            raise ValueError(f"sample_size must be positive, got {self.sample_size}")
        if self.cell_budget is not None and self.cell_budget < 1:
            raise ValueError(f"cell_budget must be positive, got {self.cell_budget}")


# Capture takes the same knobs as diff.
CaptureOptions = DiffOptions


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class SheetRef:
    """A sheet that was added or removed."""

    sheet_id: int
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"sheetId": self.sheet_id, "title": self.title}


@dataclass(frozen=True)
class SheetRename:
    """A sheet whose title changed."""

    sheet_id: int
    old_title: str
    new_title: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetId": self.sheet_id,
            "oldTitle": self.old_title,
            "newTitle": self.new_title,
        }


@dataclass
class SheetChanges:
    """Structural changes at the sheet level."""

    sheets_added: list[SheetRef] = field(default_factory=list)
    sheets_removed: list[SheetRef] = field(default_factory=list)
    sheets_renamed: list[SheetRename] = field(default_factory=list)

    def has_changes(self) -> bool:
        return bool(self.sheets_added or self.sheets_removed or self.sheets_renamed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetsAdded": [s.to_dict() for s in self.sheets_added],
            "sheetsRemoved": [s.to_dict() for s in self.sheets_removed],
            "sheetsRenamed": [s.to_dict() for s in self.sheets_renamed],
        }


ChangeKind = Literal["value", "added", "removed"]


@dataclass(frozen=True)
class CellChange:
    """Represents a change to a single cell's value.

    ``before`` is MISSING for added cells and ``after`` is MISSING for
    removed cells.
    """

    cell: str  # sheet-qualified A1 notation, e.g. Sheet1!B1
    before: MaybeCell
    after: MaybeCell
    kind: ChangeKind = "value"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"cell": self.cell, "kind": self.kind}
        if self.before is not MISSING:
            result["before"] = self.before
        if self.after is not MISSING:
            result["after"] = self.after
        return result


@dataclass(frozen=True)
class StateSummary:
    """Aggregate dimensions of one side of a metadata diff."""

    captured_at: datetime
    row_count: int
    column_count: int
    digest: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.captured_at.isoformat(),
            "rowCount": self.row_count,
            "columnCount": self.column_count,
            "checksum": self.digest,
        }


@dataclass
class MetadataDiffResult:
    """Tier 1: structural comparison only."""

    before: StateSummary
    after: StateSummary
    rows_changed: int
    columns_changed: int
    estimated_cells_changed: int
    sheet_changes: SheetChanges
    tier: Literal[Tier.METADATA] = Tier.METADATA

    def has_changes(self) -> bool:
        return self.before.digest != self.after.digest or self.sheet_changes.has_changes()

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
            "summary": {
                "rowsChanged": self.rows_changed,
                "columnsChanged": self.columns_changed,
                "estimatedCellsChanged": self.estimated_cells_changed,
            },
            "sheetChanges": self.sheet_changes.to_dict(),
        }


@dataclass
class SampleBuckets:
    """Sampled changes grouped by where the row was taken from."""

    head_rows: list[CellChange] = field(default_factory=list)
    tail_rows: list[CellChange] = field(default_factory=list)
    # Reserved for sampling strategies beyond head and tail; always empty today.
    other_rows: list[CellChange] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.head_rows) + len(self.tail_rows) + len(self.other_rows)

    def to_dict(self) -> dict[str, Any]:
        return {
            "headRows": [c.to_dict() for c in self.head_rows],
            "tailRows": [c.to_dict() for c in self.tail_rows],
            "otherRows": [c.to_dict() for c in self.other_rows],
        }


@dataclass
class SampleDiffResult:
    """Tier 2: head/tail row samples compared cell by cell."""

    samples: SampleBuckets
    rows_changed: int
    cells_sampled: int
    sheet_changes: SheetChanges
    tier: Literal[Tier.SAMPLE] = Tier.SAMPLE

    def has_changes(self) -> bool:
        return bool(self.samples) or self.sheet_changes.has_changes()

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "samples": self.samples.to_dict(),
            "summary": {
                "rowsChanged": self.rows_changed,
                "cellsSampled": self.cells_sampled,
            },
            "sheetChanges": self.sheet_changes.to_dict(),
        }


@dataclass
class FullDiffResult:
    """Tier 3: exact cell-level diff within the cell budget."""

    changes: list[CellChange]
    cells_added: int
    cells_removed: int
    cells_compared: int
    sheet_changes: SheetChanges
    tier: Literal[Tier.FULL] = Tier.FULL

    @property
    def cells_changed(self) -> int:
        return len(self.changes)

    def has_changes(self) -> bool:
        return bool(
            self.changes
            or self.cells_added
            or self.cells_removed
            or self.sheet_changes.has_changes()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "changes": [c.to_dict() for c in self.changes],
            "summary": {
                "cellsChanged": self.cells_changed,
                "cellsAdded": self.cells_added,
                "cellsRemoved": self.cells_removed,
                "cellsCompared": self.cells_compared,
            },
            "sheetChanges": self.sheet_changes.to_dict(),
        }


DiffResult = Union[MetadataDiffResult, SampleDiffResult, FullDiffResult]
