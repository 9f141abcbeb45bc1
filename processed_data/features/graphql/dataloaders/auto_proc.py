"""Relationship fetchers for the AutoProc* tables.

One-to-one relationships (program, AutoProc, scaling) keep the row with
the lowest primary key when ISPyB holds more than one.
"""

from __future__ import annotations

from collections.abc import Sequence
from operator import attrgetter

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from processed_data.features.graphql.dataloaders.base import first_by, group_by
from processed_data.features.ispyb.models import (
    AutoProc,
    AutoProcProgram,
    AutoProcProgramAttachment,
    AutoProcScaling,
)


async def fetch_auto_proc_programs(
    session: AsyncSession,
    auto_proc_program_ids: Sequence[int],
) -> dict[int, AutoProcProgram]:
    """Load programs by primary key."""
    stmt = select(AutoProcProgram).where(AutoProcProgram.id.in_(auto_proc_program_ids))
    result = await session.execute(stmt)
    return {program.id: program for program in result.scalars()}


async def fetch_program_attachments(
    session: AsyncSession,
    auto_proc_program_ids: Sequence[int],
) -> dict[int, list[AutoProcProgramAttachment]]:
    """Load the files written by each program, most important first.

    ISPyB ranks attachments with ``importanceRank`` (1 is most important);
    unranked files follow, in insertion order.
    """
    stmt = (
        select(AutoProcProgramAttachment)
        .where(AutoProcProgramAttachment.auto_proc_program_id.in_(auto_proc_program_ids))
        .order_by(
            AutoProcProgramAttachment.importance_rank.is_(None),
            AutoProcProgramAttachment.importance_rank,
            AutoProcProgramAttachment.id,
        )
    )
    result = await session.execute(stmt)
    return group_by(result.scalars(), attrgetter("auto_proc_program_id"))


async def fetch_auto_procs(
    session: AsyncSession,
    auto_proc_program_ids: Sequence[int],
) -> dict[int, AutoProc]:
    """Load the AutoProc result of each program."""
    stmt = (
        select(AutoProc)
        .where(AutoProc.auto_proc_program_id.in_(auto_proc_program_ids))
        .order_by(AutoProc.id)
    )
    result = await session.execute(stmt)
    return first_by(result.scalars(), attrgetter("auto_proc_program_id"))


async def fetch_auto_proc_scalings(
    session: AsyncSession,
    auto_proc_ids: Sequence[int],
) -> dict[int, AutoProcScaling]:
    """Load the scaling of each AutoProc result."""
    stmt = (
        select(AutoProcScaling)
        .where(AutoProcScaling.auto_proc_id.in_(auto_proc_ids))
        .order_by(AutoProcScaling.id)
    )
    result = await session.execute(stmt)
    return first_by(result.scalars(), attrgetter("auto_proc_id"))


__all__ = [
    "fetch_auto_proc_programs",
    "fetch_auto_proc_scalings",
    "fetch_auto_procs",
    "fetch_program_attachments",
]
