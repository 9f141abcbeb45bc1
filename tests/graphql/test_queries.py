"""Tests for relationship fields of the Datasets entity."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import pytest
from strawberry.extensions import QueryDepthLimiter

from processed_data.features.graphql.schema import create_schema, schema
from tests.conftest import FakeStorage, selects_from

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from processed_data.features.graphql.context import GraphQLContext

pytestmark = pytest.mark.usefixtures("seeded")

PROCESSING_JOBS_QUERY = """
query ProcessingJobs($id: Int!) {
    dataCollection(id: $id) {
        id
        processingJobs {
            id
            displayName
            recipe
            automatic
            parameters { id parameterKey parameterValue }
            autoProcPrograms { id processingPrograms processingStatus }
        }
    }
}
"""

PROCESSED_DATA_QUERY = """
query ProcessedData($id: Int!) {
    dataCollection(id: $id) {
        processedData { id fileType downloadUrl }
    }
}
"""

ATTACHMENTS_QUERY = """
query Attachments($id: Int!) {
    dataCollection(id: $id) {
        autoProcPrograms {
            id
            attachments { id fileName importanceRank downloadUrl }
        }
    }
}
"""

STATISTICS_QUERY = """
query Statistics($id: Int!) {
    dataCollection(id: $id) {
        autoProcIntegration {
            id
            autoProcProgram {
                id
                autoProc {
                    spaceGroup
                    scaling {
                        id
                        overall { id type ccHalf completeness }
                        innerShell { id type }
                        statistics(type: OUTER_SHELL) { id type ccHalf }
                    }
                }
            }
        }
    }
}
"""


@pytest.mark.asyncio
async def test_processing_jobs_with_nested_fields(graphql_context: GraphQLContext) -> None:
    """Test that jobs resolve with their parameters and program runs."""
    result = await schema.execute(
        PROCESSING_JOBS_QUERY,
        variable_values={"id": 1},
        context_value=graphql_context,
    )

    assert result.errors is None
    data = result.data["dataCollection"]
    assert data["id"] == 1

    jobs = data["processingJobs"]
    assert [job["id"] for job in jobs] == [100, 101]
    assert jobs[0]["displayName"] == "fast_dp"
    assert jobs[0]["recipe"] == "autoprocessing-fast-dp"
    assert jobs[0]["automatic"] is True
    assert jobs[0]["parameters"] == [
        {"id": 1000, "parameterKey": "ispyb_dcid", "parameterValue": "1"},
        {"id": 1001, "parameterKey": "resolution", "parameterValue": "1.8"},
    ]
    assert jobs[0]["autoProcPrograms"] == [
        {"id": 200, "processingPrograms": "fast_dp", "processingStatus": 1},
    ]
    assert jobs[1]["parameters"] == []
    assert [p["id"] for p in jobs[1]["autoProcPrograms"]] == [201]


@pytest.mark.asyncio
async def test_sibling_entities_share_one_fetch_per_relationship(
    graphql_context: GraphQLContext,
    statements: list[str],
) -> None:
    """Test that aliased data collections are loaded in one batch per level."""
    query = """
    {
        a: dataCollection(id: 1) { processingJobs { id parameters { id } } }
        b: dataCollection(id: 2) { processingJobs { id parameters { id } } }
    }
    """

    result = await schema.execute(query, context_value=graphql_context)

    assert result.errors is None
    assert [job["id"] for job in result.data["a"]["processingJobs"]] == [100, 101]
    assert [job["id"] for job in result.data["b"]["processingJobs"]] == [102]
    assert len(selects_from(statements, "ProcessingJob")) == 1
    assert len(selects_from(statements, "ProcessingJobParameter")) == 1


@pytest.mark.asyncio
async def test_empty_data_collection_has_empty_lists(graphql_context: GraphQLContext) -> None:
    """Test that a collection without processing yields empty lists, not nulls."""
    query = """
    {
        dataCollection(id: 3) {
            id
            processedData { id }
            processingJobs { id }
            autoProcIntegration { id }
            autoProcPrograms { id }
        }
    }
    """

    result = await schema.execute(query, context_value=graphql_context)

    assert result.errors is None
    assert result.data["dataCollection"] == {
        "id": 3,
        "processedData": [],
        "processingJobs": [],
        "autoProcIntegration": [],
        "autoProcPrograms": [],
    }


@pytest.mark.asyncio
async def test_processed_data_download_urls(
    graphql_context: GraphQLContext,
    storage: FakeStorage,
) -> None:
    """Test that file paths are signed as keys without the leading slash."""
    result = await schema.execute(
        PROCESSED_DATA_QUERY,
        variable_values={"id": 1},
        context_value=graphql_context,
    )

    assert result.errors is None
    files = result.data["dataCollection"]["processedData"]
    assert [f["id"] for f in files] == [10, 11]
    assert files[0]["fileType"] == "output"
    assert files[0]["downloadUrl"] == (
        "https://s3.test/test-bucket/dls/i03/data/2024/cm1234-1/processed/fast_dp.mtz"
        "?X-Amz-Expires=600"
    )
    assert sorted(storage.signed) == [
        "dls/i03/data/2024/cm1234-1/processed/fast_dp.mtz",
        "relative/xia2.log",
    ]


@pytest.mark.asyncio
async def test_attachment_keys_join_path_and_name(
    graphql_context: GraphQLContext,
    storage: FakeStorage,
) -> None:
    """Test attachment ordering and object keys built from directory and name."""
    result = await schema.execute(
        ATTACHMENTS_QUERY,
        variable_values={"id": 1},
        context_value=graphql_context,
    )

    assert result.errors is None
    programs = result.data["dataCollection"]["autoProcPrograms"]
    assert [p["id"] for p in programs] == [200, 201]

    attachments = programs[0]["attachments"]
    assert [a["id"] for a in attachments] == [701, 700, 702]
    assert [a["importanceRank"] for a in attachments] == [1, 2, None]
    assert programs[1]["attachments"] == []
    assert sorted(storage.signed) == [
        "dls/i03/data/2024/cm1234-1/processed/fast_dp/fast_dp.log",
        "dls/i03/data/2024/cm1234-1/processed/fast_dp/fast_dp.mtz",
        "relative/fast_dp/plot.json",
    ]


@pytest.mark.asyncio
async def test_download_url_without_storage(graphql_context: GraphQLContext) -> None:
    """Test that missing storage fails the URL field only."""
    graphql_context.storage = None

    result = await schema.execute(
        PROCESSED_DATA_QUERY,
        variable_values={"id": 2},
        context_value=graphql_context,
    )

    assert result.data["dataCollection"]["processedData"] == [
        {"id": 12, "fileType": "output", "downloadUrl": None},
    ]
    assert len(result.errors) == 1
    assert result.errors[0].message == "Object storage is not configured"
    assert result.errors[0].path == ["dataCollection", "processedData", 0, "downloadUrl"]


@pytest.mark.asyncio
async def test_signing_failure_nulls_only_that_row(graphql_context: GraphQLContext) -> None:
    """Test that one failed signature does not affect sibling rows."""
    graphql_context.storage = FakeStorage(failing_keys={"relative/xia2.log"})  # type: ignore[assignment]

    result = await schema.execute(
        PROCESSED_DATA_QUERY,
        variable_values={"id": 1},
        context_value=graphql_context,
    )

    files = result.data["dataCollection"]["processedData"]
    assert files[0]["downloadUrl"].startswith("https://s3.test/")
    assert files[1]["downloadUrl"] is None
    assert [error.path for error in result.errors] == [
        ["dataCollection", "processedData", 1, "downloadUrl"],
    ]


@pytest.mark.asyncio
async def test_failed_fetch_is_partial(
    graphql_context: GraphQLContext,
    db_engine: AsyncEngine,
) -> None:
    """Test that a failing relationship leaves the other fields intact."""
    async with db_engine.begin() as conn:
        await conn.exec_driver_sql('DROP TABLE "ProcessingJob"')

    query = """
    {
        dataCollection(id: 1) {
            id
            processingJobs { id }
            processedData { id }
        }
    }
    """

    result = await schema.execute(query, context_value=graphql_context)

    data = result.data["dataCollection"]
    assert data["id"] == 1
    assert data["processingJobs"] is None
    assert [f["id"] for f in data["processedData"]] == [10, 11]
    assert len(result.errors) == 1
    assert result.errors[0].path == ["dataCollection", "processingJobs"]
    assert "Failed to load processing_jobs" in result.errors[0].message


@pytest.mark.asyncio
async def test_scaling_statistics_by_shell(graphql_context: GraphQLContext) -> None:
    """Test that each shell selection returns its own statistics row."""
    result = await schema.execute(
        STATISTICS_QUERY,
        variable_values={"id": 1},
        context_value=graphql_context,
    )

    assert result.errors is None
    integrations = result.data["dataCollection"]["autoProcIntegration"]
    assert [i["id"] for i in integrations] == [300, 301, 302]

    fast_dp = integrations[0]["autoProcProgram"]["autoProc"]
    assert fast_dp["spaceGroup"] == "P 21 21 21"
    scaling = fast_dp["scaling"]
    assert scaling["id"] == 500
    assert scaling["overall"] == {
        "id": 600,
        "type": "OVERALL",
        "ccHalf": 0.998,
        "completeness": 99.8,
    }
    assert scaling["innerShell"] == {"id": 601, "type": "INNER_SHELL"}
    assert scaling["statistics"] == {"id": 602, "type": "OUTER_SHELL", "ccHalf": 0.61}

    # Shared program resolves to the same result
    assert integrations[2]["autoProcProgram"]["autoProc"] == fast_dp


@pytest.mark.asyncio
async def test_statistics_literal_is_case_sensitive(graphql_context: GraphQLContext) -> None:
    """Test that a miscased shell literal is not returned for that shell."""
    result = await schema.execute(
        STATISTICS_QUERY,
        variable_values={"id": 1},
        context_value=graphql_context,
    )

    assert result.errors is None
    scaling = result.data["dataCollection"]["autoProcIntegration"][1]["autoProcProgram"][
        "autoProc"
    ]["scaling"]
    assert scaling["id"] == 501
    assert scaling["overall"]["id"] == 603
    assert scaling["innerShell"] is None
    assert scaling["statistics"] is None


@pytest.mark.asyncio
async def test_statistics_argument(graphql_context: GraphQLContext) -> None:
    """Test choosing the shell through the statistics argument."""
    query = """
    {
        dataCollection(id: 1) {
            autoProcPrograms {
                autoProc { scaling { statistics(type: INNER_SHELL) { id ccHalf } } }
            }
        }
    }
    """

    result = await schema.execute(query, context_value=graphql_context)

    assert result.errors is None
    programs = result.data["dataCollection"]["autoProcPrograms"]
    assert programs[0]["autoProc"]["scaling"]["statistics"] == {"id": 601, "ccHalf": 0.999}
    assert programs[1]["autoProc"]["scaling"]["statistics"] is None



@pytest.mark.asyncio
async def test_query_depth_is_limited(graphql_context: GraphQLContext) -> None:
    """Test that documents nested beyond the configured depth are rejected."""
    shallow = create_schema(extensions=[partial(QueryDepthLimiter, max_depth=3)])
    query = """
    {
        dataCollection(id: 1) {
            processingJobs { autoProcPrograms { autoProc { id } } }
        }
    }
    """

    result = await shallow.execute(query, context_value=graphql_context)

    assert result.data is None
    assert "exceeds maximum operation depth" in result.errors[0].message
