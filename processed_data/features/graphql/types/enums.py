"""GraphQL enums backed by ISPyB literal enums."""

from __future__ import annotations

import strawberry

from processed_data.features.ispyb.enums import StatisticsType as IspybStatisticsType

# Same Python enum as the loader keys, so arguments need no conversion
StatisticsType = strawberry.enum(
    IspybStatisticsType,
    name="StatisticsType",
    description="Resolution shell described by a scaling statistics row",
)

__all__ = ["StatisticsType"]
