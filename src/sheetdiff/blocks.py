"""Block index: one content digest per fixed-size run of rows.

Comparing two sheets' block digests tells the full differ which row ranges
can be skipped without looking at individual cells.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from sheetdiff.hashing import content_digest
from sheetdiff.values import grid_to_json

if TYPE_CHECKING:
    from sheetdiff.values import Grid

DEFAULT_BLOCK_SIZE = 1000


class BlockIndex:
    """Partitions rows into blocks of ``block_size`` rows."""

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        if block_size < 1:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self.block_size = block_size

    def compute_digests(self, grid: Grid) -> tuple[str, ...]:
        """Digest each block of rows; ``digests[i]`` covers rows
        ``[i * block_size, (i + 1) * block_size)``."""
        return tuple(
            content_digest(grid_to_json(grid[start : start + self.block_size]))
            for start in range(0, len(grid), self.block_size)
        )

    def block_count(self, row_count: int) -> int:
        return -(-row_count // self.block_size)

    def iter_blocks(self, row_count: int) -> Iterator[tuple[int, range]]:
        """Yield ``(block_index, rows)`` covering ``row_count`` rows."""
        for index in range(self.block_count(row_count)):
            start = index * self.block_size
            yield index, range(start, min(start + self.block_size, row_count))


def changed_blocks(
    before: Sequence[str] | None,
    after: Sequence[str] | None,
) -> set[int] | None:
    """Return indices of blocks whose digests differ.

    A block present on only one side counts as changed. Returns None when
    either side has no index, meaning every block must be compared.
    """
    if before is None or after is None:
        return None

    changed: set[int] = set()
    for i in range(max(len(before), len(after))):
        before_digest = before[i] if i < len(before) else None
        after_digest = after[i] if i < len(after) else None
        if before_digest is None or before_digest != after_digest:
            changed.add(i)
    return changed
