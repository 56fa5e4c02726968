"""Cell value model.

A cell holds one of four kinds of value: string, number, boolean or null.
Comparison is by kind first, then by value, so ``True`` and ``1`` are
different cells even though Python considers them equal.

A position beyond the end of a fetched row is *absent*, represented by the
``MISSING`` sentinel. Absent is not the same as null.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from typing import Literal, Union

CellValue = Union[str, int, float, bool, None]
CellKind = Literal["string", "number", "boolean", "null"]

Row = Sequence[CellValue]
Grid = Sequence[Row]


class _Missing(enum.Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING
MaybeCell = Union[CellValue, _Missing]


def cell_kind(value: CellValue) -> CellKind:
    """Return the tag of a cell value."""
    if value is None:
        return "null"
    # bool must be checked before int, bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    raise TypeError(f"Unsupported cell value type: {type(value).__name__}")


def values_equal(a: MaybeCell, b: MaybeCell) -> bool:
    """Tagged equality for cells, including the absent sentinel."""
    if a is MISSING or b is MISSING:
        return a is b
    if cell_kind(a) != cell_kind(b):
        return False
    return a == b


def row_at(grid: Grid, row: int) -> Row:
    """Return a row of the grid, or an empty row if outside it."""
    if row < len(grid):
        return grid[row]
    return ()


def count_cells(grid: Grid) -> int:
    """Count the cells actually present in a ragged grid."""
    return sum(len(row) for row in grid)


def freeze_grid(grid: Grid) -> tuple[tuple[CellValue, ...], ...]:
    """Copy a grid into nested tuples so snapshots cannot be mutated."""
    return tuple(tuple(row) for row in grid)


def grid_to_json(grid: Grid) -> list[list[CellValue]]:
    """Convert a grid to plain lists for hashing or serialization."""
    return [list(row) for row in grid]
