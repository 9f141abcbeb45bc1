"""GraphQL types exposed by the processed-data subgraph."""

from __future__ import annotations

from processed_data.features.graphql.types.auto_proc import (
    AutoProc,
    AutoProcIntegration,
    AutoProcProgram,
    AutoProcProgramAttachment,
    AutoProcScaling,
    AutoProcScalingStatistics,
)
from processed_data.features.graphql.types.data_collection import DataCollection, DataProcessing
from processed_data.features.graphql.types.enums import StatisticsType
from processed_data.features.graphql.types.processing import (
    ProcessingJob,
    ProcessingJobParameter,
)

__all__ = [
    "AutoProc",
    "AutoProcIntegration",
    "AutoProcProgram",
    "AutoProcProgramAttachment",
    "AutoProcScaling",
    "AutoProcScalingStatistics",
    "DataCollection",
    "DataProcessing",
    "ProcessingJob",
    "ProcessingJobParameter",
    "StatisticsType",
]
