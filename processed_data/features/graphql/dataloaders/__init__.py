"""DataLoader container and factory.

DataLoaders batch and cache relational lookups within a single request,
preventing N+1 query problems common in GraphQL resolvers.

Each GraphQL request gets its own ``DataLoaders`` so batching boundaries
and caches never cross requests.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from processed_data.features.graphql.dataloaders.base import (
    BatchLoader,
    Database,
    LoaderShape,
)
from processed_data.features.graphql.dataloaders.kinds import (
    LOADER_SPECS,
    LoaderKind,
    LoaderSpec,
)
from processed_data.features.graphql.dataloaders.statistics import ScalingStatisticsKey


@dataclass(frozen=True)
class DataLoaders:
    """Container for all DataLoader instances.

    One instance created per GraphQL request, one loader per
    ``LoaderKind``.

    Usage in resolver:
        ctx = info.context
        jobs = await ctx.loaders.processing_jobs.load(data_collection_id)
        same = ctx.loaders.get(LoaderKind.PROCESSING_JOBS)
    """

    processed_data: BatchLoader
    processing_jobs: BatchLoader
    auto_proc_integrations: BatchLoader
    data_collection_programs: BatchLoader
    processing_job_parameters: BatchLoader
    processing_job_programs: BatchLoader
    auto_proc_program: BatchLoader
    program_attachments: BatchLoader
    auto_proc: BatchLoader
    auto_proc_scaling: BatchLoader
    scaling_statistics: BatchLoader

    def get(self, kind: LoaderKind) -> BatchLoader:
        """Return the loader for a relationship kind."""
        return getattr(self, kind.value)

    def __iter__(self):
        return (getattr(self, f.name) for f in fields(self))


def create_dataloaders(
    database: Database,
    *,
    max_batch_size: int | None = None,
) -> DataLoaders:
    """Factory for creating request-scoped DataLoaders.

    Args:
        database: Session factory; each batch opens its own session so
            concurrent batches never share a connection.
        max_batch_size: Optional cap on keys per fetch.

    Returns:
        DataLoaders container with all loaders initialized
    """
    loaders = {
        kind.value: BatchLoader(
            kind.value,
            spec.fetch,
            database,
            spec.shape,
            key=spec.key,
            max_batch_size=max_batch_size,
        )
        for kind, spec in LOADER_SPECS.items()
    }
    return DataLoaders(**loaders)


__all__ = [
    "LOADER_SPECS",
    "BatchLoader",
    "DataLoaders",
    "LoaderKind",
    "LoaderShape",
    "LoaderSpec",
    "ScalingStatisticsKey",
    "create_dataloaders",
]
