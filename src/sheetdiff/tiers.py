"""Tier selection: downgrade requests that would cost too much."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sheetdiff.models import Tier

if TYPE_CHECKING:
    from sheetdiff.models import DatasetState

logger = logging.getLogger(__name__)

# Sampling reads an order of magnitude fewer cells than a full scan.
SAMPLE_BUDGET_MULTIPLIER = 10


def select_tier(
    requested: Tier,
    before: DatasetState,
    after: DatasetState,
    cell_budget: int,
) -> Tier:
    """Pick the tier to actually run for a pair of states.

    FULL falls back to SAMPLE when either state holds more than
    ``cell_budget`` cells; SAMPLE falls back to METADATA above
    ``cell_budget * SAMPLE_BUDGET_MULTIPLIER``.
    """
    max_cells = max(before.total_cells, after.total_cells)

    effective = requested
    if requested is Tier.FULL and max_cells > cell_budget:
        effective = Tier.SAMPLE
    elif (
        requested is Tier.SAMPLE
        and max_cells > cell_budget * SAMPLE_BUDGET_MULTIPLIER
    ):
        effective = Tier.METADATA

    if effective is not requested:
        logger.info(
            "Downgraded diff tier %s -> %s (%d cells, budget %d)",
            requested.value,
            effective.value,
            max_cells,
            cell_budget,
        )
    return effective
