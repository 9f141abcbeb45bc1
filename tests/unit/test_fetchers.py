"""Tests for the relationship fetchers against a seeded SQLite store."""

from __future__ import annotations

import pytest

from processed_data.features.graphql.dataloaders.auto_proc import (
    fetch_auto_proc_programs,
    fetch_auto_proc_scalings,
    fetch_auto_procs,
    fetch_program_attachments,
)
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
from processed_data.features.ispyb.enums import StatisticsType
from tests.conftest import selects_from

pytestmark = pytest.mark.usefixtures("seeded")


def ids(rows) -> list[int]:
    return [row.id for row in rows]


async def test_processed_data_grouped_by_data_collection(session_factory, statements) -> None:
    async with session_factory() as session:
        found = await fetch_processed_data(session, [1, 2, 3])

    assert {k: ids(v) for k, v in found.items()} == {1: [10, 11], 2: [12]}
    assert len(selects_from(statements, "DataCollectionFileAttachment")) == 1


async def test_processing_jobs_only_returns_matched_keys(session_factory) -> None:
    async with session_factory() as session:
        found = await fetch_processing_jobs(session, [2, 3])

    assert {k: ids(v) for k, v in found.items()} == {2: [102]}


async def test_integrations_ordered_by_primary_key(session_factory) -> None:
    async with session_factory() as session:
        found = await fetch_auto_proc_integrations(session, [1])

    assert ids(found[1]) == [300, 301, 302]


async def test_data_collection_programs_are_distinct(session_factory, statements) -> None:
    async with session_factory() as session:
        found = await fetch_data_collection_programs(session, [1, 2])

    # Program 200 integrates collection 1 twice
    assert {k: ids(v) for k, v in found.items()} == {1: [200, 201]}
    assert len(selects_from(statements, "AutoProcIntegration")) == 1


async def test_job_parameters_and_programs(session_factory) -> None:
    async with session_factory() as session:
        parameters = await fetch_processing_job_parameters(session, [100, 101])
        programs = await fetch_processing_job_programs(session, [100, 101, 102])

    assert {k: ids(v) for k, v in parameters.items()} == {100: [1000, 1001]}
    assert {k: ids(v) for k, v in programs.items()} == {100: [200], 101: [201]}


async def test_programs_by_id(session_factory) -> None:
    async with session_factory() as session:
        found = await fetch_auto_proc_programs(session, [200, 999])

    assert list(found) == [200]
    assert found[200].processing_programs == "fast_dp"


async def test_auto_proc_keeps_lowest_id_per_program(session_factory) -> None:
    async with session_factory() as session:
        found = await fetch_auto_procs(session, [200, 201])

    assert found[200].id == 400
    assert found[201].id == 401


async def test_scaling_by_auto_proc(session_factory) -> None:
    async with session_factory() as session:
        found = await fetch_auto_proc_scalings(session, [400, 401, 402])

    assert {k: v.id for k, v in found.items()} == {400: 500, 401: 501}


async def test_attachments_ranked_before_unranked(session_factory) -> None:
    async with session_factory() as session:
        found = await fetch_program_attachments(session, [200])

    assert ids(found[200]) == [701, 700, 702]


class TestScalingStatistics:
    """Composite (scaling, shell) keys."""

    async def test_returns_exactly_the_requested_pairs(self, session_factory, statements) -> None:
        keys = [(500, StatisticsType.OVERALL), (501, StatisticsType.OVERALL)]

        async with session_factory() as session:
            found = await fetch_scaling_statistics(session, keys)

        assert {k: v.id for k, v in found.items()} == {
            (500, StatisticsType.OVERALL): 600,
            (501, StatisticsType.OVERALL): 603,
        }
        assert len(selects_from(statements, "AutoProcScalingStatistics")) == 1

    async def test_no_cross_product_of_scalings_and_shells(self, session_factory) -> None:
        keys = [(500, StatisticsType.INNER_SHELL), (501, StatisticsType.OVERALL)]

        async with session_factory() as session:
            found = await fetch_scaling_statistics(session, keys)

        # (500, OVERALL) and (501, INNER_SHELL) were not asked for
        assert {k: v.id for k, v in found.items()} == {
            (500, StatisticsType.INNER_SHELL): 601,
            (501, StatisticsType.OVERALL): 603,
        }

    async def test_literal_must_match_case(self, session_factory) -> None:
        async with session_factory() as session:
            found = await fetch_scaling_statistics(session, [(501, StatisticsType.INNER_SHELL)])

        # Row 604 is stored as "InnerShell"
        assert found == {}

    def test_literal_table(self) -> None:
        assert [t.to_literal() for t in StatisticsType] == ["overall", "innerShell", "outerShell"]
        assert StatisticsType.from_literal("outerShell") is StatisticsType.OUTER_SHELL
        with pytest.raises(ValueError):
            StatisticsType.from_literal("OUTERSHELL")
