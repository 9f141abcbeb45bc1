"""Relationship fetchers keyed by ``dataCollectionId``.

Data collections themselves live in another subgraph; this service only
knows their ids and the processing rows that point at them.
"""

from __future__ import annotations

from collections.abc import Sequence
from operator import attrgetter

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from processed_data.features.graphql.dataloaders.base import group_by
from processed_data.features.ispyb.models import (
    AutoProcIntegration,
    AutoProcProgram,
    DataCollectionFileAttachment,
    ProcessingJob,
)


async def fetch_processed_data(
    session: AsyncSession,
    data_collection_ids: Sequence[int],
) -> dict[int, list[DataCollectionFileAttachment]]:
    """Load the file attachments of each data collection.

    Args:
        session: Session for this batch
        data_collection_ids: Data collection ids to load

    Returns:
        Attachments grouped by data collection id
    """
    stmt = (
        select(DataCollectionFileAttachment)
        .where(DataCollectionFileAttachment.data_collection_id.in_(data_collection_ids))
        .order_by(DataCollectionFileAttachment.id)
    )
    result = await session.execute(stmt)
    return group_by(result.scalars(), attrgetter("data_collection_id"))


async def fetch_processing_jobs(
    session: AsyncSession,
    data_collection_ids: Sequence[int],
) -> dict[int, list[ProcessingJob]]:
    """Load the processing jobs requested for each data collection."""
    stmt = (
        select(ProcessingJob)
        .where(ProcessingJob.data_collection_id.in_(data_collection_ids))
        .order_by(ProcessingJob.id)
    )
    result = await session.execute(stmt)
    return group_by(result.scalars(), attrgetter("data_collection_id"))


async def fetch_auto_proc_integrations(
    session: AsyncSession,
    data_collection_ids: Sequence[int],
) -> dict[int, list[AutoProcIntegration]]:
    """Load the integration results of each data collection."""
    stmt = (
        select(AutoProcIntegration)
        .where(AutoProcIntegration.data_collection_id.in_(data_collection_ids))
        .order_by(AutoProcIntegration.id)
    )
    result = await session.execute(stmt)
    return group_by(result.scalars(), attrgetter("data_collection_id"))


async def fetch_data_collection_programs(
    session: AsyncSession,
    data_collection_ids: Sequence[int],
) -> dict[int, list[AutoProcProgram]]:
    """Load the programs that integrated each data collection.

    Programs are reached through AutoProcIntegration in a single join. A
    program integrating the same collection twice is returned once.

    Args:
        session: Session for this batch
        data_collection_ids: Data collection ids to load

    Returns:
        Programs grouped by data collection id, ordered by program id
    """
    stmt = (
        select(AutoProcIntegration.data_collection_id, AutoProcProgram)
        .join(AutoProcProgram, AutoProcProgram.id == AutoProcIntegration.auto_proc_program_id)
        .where(AutoProcIntegration.data_collection_id.in_(data_collection_ids))
        .distinct()
        .order_by(AutoProcIntegration.data_collection_id, AutoProcProgram.id)
    )
    result = await session.execute(stmt)

    grouped: dict[int, list[AutoProcProgram]] = {}
    for data_collection_id, program in result.all():
        grouped.setdefault(data_collection_id, []).append(program)
    return grouped


__all__ = [
    "fetch_auto_proc_integrations",
    "fetch_data_collection_programs",
    "fetch_processed_data",
    "fetch_processing_jobs",
]
