"""ISPyB tables describing processed data of a data collection."""

from __future__ import annotations

from .enums import StatisticsType
from .models import (
    AutoProc,
    AutoProcIntegration,
    AutoProcProgram,
    AutoProcProgramAttachment,
    AutoProcScaling,
    AutoProcScalingStatistics,
    DataCollectionFileAttachment,
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
    "DataCollectionFileAttachment",
    "ProcessingJob",
    "ProcessingJobParameter",
    "StatisticsType",
]
