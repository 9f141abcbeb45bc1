"""Composite-key fetcher for scaling statistics.

Keys are ``(autoProcScalingId, StatisticsType)`` pairs. The predicate is
a row-value membership test over exactly the requested pairs, so asking
for ``(1, OVERALL)`` and ``(2, INNER_SHELL)`` never returns the inner
shell of scaling 1.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select, tuple_
from sqlalchemy.ext.asyncio import AsyncSession

from processed_data.features.ispyb.enums import StatisticsType
from processed_data.features.ispyb.models import AutoProcScalingStatistics

logger = logging.getLogger(__name__)

ScalingStatisticsKey = tuple[int, StatisticsType]


async def fetch_scaling_statistics(
    session: AsyncSession,
    keys: Sequence[ScalingStatisticsKey],
) -> dict[ScalingStatisticsKey, AutoProcScalingStatistics]:
    """Load one statistics row per (scaling, shell) pair.

    MySQL compares strings case-insensitively under ISPyB's default
    collation, so the stored literal is checked again here and rows that
    do not match a requested pair exactly are dropped.

    Args:
        session: Session for this batch
        keys: Requested (scaling id, statistics type) pairs

    Returns:
        First matching row per requested pair
    """
    requested = set(keys)
    pairs = [(scaling_id, statistics_type.to_literal()) for scaling_id, statistics_type in requested]
    columns = tuple_(
        AutoProcScalingStatistics.auto_proc_scaling_id,
        AutoProcScalingStatistics.scaling_statistics_type,
    )
    stmt = (
        select(AutoProcScalingStatistics)
        .where(columns.in_(pairs))
        .order_by(AutoProcScalingStatistics.id)
    )
    result = await session.execute(stmt)

    found: dict[ScalingStatisticsKey, AutoProcScalingStatistics] = {}
    for row in result.scalars():
        try:
            statistics_type = StatisticsType.from_literal(row.scaling_statistics_type)
        except ValueError:
            logger.debug(
                "Skipping statistics row with non-canonical type literal",
                extra={"statistics_id": row.id, "literal": row.scaling_statistics_type},
            )
            continue
        key = (row.auto_proc_scaling_id, statistics_type)
        if key in requested:
            found.setdefault(key, row)
    return found


__all__ = ["ScalingStatisticsKey", "fetch_scaling_statistics"]
