"""sheetdiff - Tiered diff engine for Google Sheets snapshots.

Determines what changed between two snapshots of a spreadsheet at a cost
the caller chooses: sheet metadata only, head/tail row samples, or an
exact cell-level diff bounded by a cell budget.
"""

__version__ = "0.1.0"

from sheetdiff.engine import DiffEngine
from sheetdiff.exceptions import DiffEngineError, MalformedStateError
from sheetdiff.models import (
    CaptureOptions,
    CellChange,
    DatasetState,
    DiffOptions,
    DiffResult,
    FullDiffResult,
    MetadataDiffResult,
    RangeState,
    SampleDiffResult,
    SheetChanges,
    SheetState,
    Tier,
)
from sheetdiff.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsDataSource,
    GridDataSource,
    LocalFileDataSource,
    NotFoundError,
    SheetInfo,
    TransportError,
)

__all__ = [
    "APIError",
    "AuthenticationError",
    "CaptureOptions",
    "CellChange",
    "DatasetState",
    "DiffEngine",
    "DiffEngineError",
    "DiffOptions",
    "DiffResult",
    "FullDiffResult",
    "GoogleSheetsDataSource",
    "GridDataSource",
    "LocalFileDataSource",
    "MalformedStateError",
    "MetadataDiffResult",
    "NotFoundError",
    "RangeState",
    "SampleDiffResult",
    "SheetChanges",
    "SheetInfo",
    "SheetState",
    "Tier",
    "TransportError",
    "__version__",
]
