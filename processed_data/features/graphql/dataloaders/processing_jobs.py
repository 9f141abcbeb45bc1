"""Relationship fetchers keyed by ``processingJobId``."""

from __future__ import annotations

from collections.abc import Sequence
from operator import attrgetter

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from processed_data.features.graphql.dataloaders.base import group_by
from processed_data.features.ispyb.models import AutoProcProgram, ProcessingJobParameter


async def fetch_processing_job_parameters(
    session: AsyncSession,
    processing_job_ids: Sequence[int],
) -> dict[int, list[ProcessingJobParameter]]:
    """Load the key/value parameters of each processing job."""
    stmt = (
        select(ProcessingJobParameter)
        .where(ProcessingJobParameter.processing_job_id.in_(processing_job_ids))
        .order_by(ProcessingJobParameter.id)
    )
    result = await session.execute(stmt)
    return group_by(result.scalars(), attrgetter("processing_job_id"))


async def fetch_processing_job_programs(
    session: AsyncSession,
    processing_job_ids: Sequence[int],
) -> dict[int, list[AutoProcProgram]]:
    """Load the program runs started for each processing job."""
    stmt = (
        select(AutoProcProgram)
        .where(AutoProcProgram.processing_job_id.in_(processing_job_ids))
        .order_by(AutoProcProgram.id)
    )
    result = await session.execute(stmt)
    return group_by(result.scalars(), attrgetter("processing_job_id"))


__all__ = ["fetch_processing_job_parameters", "fetch_processing_job_programs"]
