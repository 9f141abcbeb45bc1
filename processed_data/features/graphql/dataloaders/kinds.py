"""Static table of relationship kinds served by batch loaders.

Every relationship the schema traverses is one ``LoaderKind``. Its
``LoaderSpec`` names the key it is looked up by, whether it yields one
value or a list, and the fetch function that answers a whole batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from processed_data.features.graphql.dataloaders.auto_proc import (
    fetch_auto_proc_programs,
    fetch_auto_proc_scalings,
    fetch_auto_procs,
    fetch_program_attachments,
)
from processed_data.features.graphql.dataloaders.base import FetchFn, LoaderShape
from processed_data.features.graphql.dataloaders.data_collections import (
    fetch_auto_proc_integrations,
    fetch_data_collection_programs,
    fetch_processed_data,
    fetch_processing_jobs,
)
from processed_data.features.graphql.dataloaders.processing_jobs import (
    fetch_processing_job_parameters,
    fetch_processing_job_programs,
)
from processed_data.features.graphql.dataloaders.statistics import fetch_scaling_statistics


class LoaderKind(Enum):
    """Relationship kinds. The value is the ``DataLoaders`` attribute name."""

    PROCESSED_DATA = "processed_data"
    PROCESSING_JOBS = "processing_jobs"
    AUTO_PROC_INTEGRATIONS = "auto_proc_integrations"
    DATA_COLLECTION_PROGRAMS = "data_collection_programs"
    PROCESSING_JOB_PARAMETERS = "processing_job_parameters"
    PROCESSING_JOB_PROGRAMS = "processing_job_programs"
    AUTO_PROC_PROGRAM = "auto_proc_program"
    PROGRAM_ATTACHMENTS = "program_attachments"
    AUTO_PROC = "auto_proc"
    AUTO_PROC_SCALING = "auto_proc_scaling"
    SCALING_STATISTICS = "scaling_statistics"


@dataclass(frozen=True)
class LoaderSpec:
    """How one relationship kind is keyed, shaped and fetched."""

    key: str
    shape: LoaderShape
    fetch: FetchFn


LOADER_SPECS: dict[LoaderKind, LoaderSpec] = {
    LoaderKind.PROCESSED_DATA: LoaderSpec(
        key="dataCollectionId",
        shape=LoaderShape.MANY,
        fetch=fetch_processed_data,
    ),
    LoaderKind.PROCESSING_JOBS: LoaderSpec(
        key="dataCollectionId",
        shape=LoaderShape.MANY,
        fetch=fetch_processing_jobs,
    ),
    LoaderKind.AUTO_PROC_INTEGRATIONS: LoaderSpec(
        key="dataCollectionId",
        shape=LoaderShape.MANY,
        fetch=fetch_auto_proc_integrations,
    ),
    LoaderKind.DATA_COLLECTION_PROGRAMS: LoaderSpec(
        key="dataCollectionId",
        shape=LoaderShape.MANY,
        fetch=fetch_data_collection_programs,
    ),
    LoaderKind.PROCESSING_JOB_PARAMETERS: LoaderSpec(
        key="processingJobId",
        shape=LoaderShape.MANY,
        fetch=fetch_processing_job_parameters,
    ),
    LoaderKind.PROCESSING_JOB_PROGRAMS: LoaderSpec(
        key="processingJobId",
        shape=LoaderShape.MANY,
        fetch=fetch_processing_job_programs,
    ),
    LoaderKind.AUTO_PROC_PROGRAM: LoaderSpec(
        key="autoProcProgramId",
        shape=LoaderShape.SINGLE,
        fetch=fetch_auto_proc_programs,
    ),
    LoaderKind.PROGRAM_ATTACHMENTS: LoaderSpec(
        key="autoProcProgramId",
        shape=LoaderShape.MANY,
        fetch=fetch_program_attachments,
    ),
    LoaderKind.AUTO_PROC: LoaderSpec(
        key="autoProcProgramId",
        shape=LoaderShape.SINGLE,
        fetch=fetch_auto_procs,
    ),
    LoaderKind.AUTO_PROC_SCALING: LoaderSpec(
        key="autoProcId",
        shape=LoaderShape.SINGLE,
        fetch=fetch_auto_proc_scalings,
    ),
    LoaderKind.SCALING_STATISTICS: LoaderSpec(
        key="(autoProcScalingId, StatisticsType)",
        shape=LoaderShape.SINGLE,
        fetch=fetch_scaling_statistics,
    ),
}


__all__ = ["LOADER_SPECS", "LoaderKind", "LoaderSpec"]
