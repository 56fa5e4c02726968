"""Bounded concurrency for per-sheet work, plus the shared cell budget."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 10


class BoundedScheduler:
    """Runs one coroutine per item with at most ``concurrency`` in flight.

    Results come back in input order regardless of completion order.
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        self.concurrency = concurrency

    async def map(
        self,
        func: Callable[[T], Awaitable[R]],
        items: Iterable[T],
    ) -> list[R]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_with_semaphore(item: T) -> R:
            async with semaphore:
                return await func(item)

        return list(await asyncio.gather(*(run_with_semaphore(i) for i in items)))


class CellBudget:
    """Running count of compared cells shared by concurrent sheet workers.

    Workers check ``exhausted`` before starting a sheet or a block and call
    ``consume`` after finishing one. Blocks never await, so under asyncio a
    block's consumption is never interleaved with another worker's check.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.used = 0

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit

    def consume(self, cells: int) -> None:
        self.used += cells
