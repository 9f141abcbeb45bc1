"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: cache isolation between tests
    - Database Fixtures: file-backed SQLite standing in for ISPyB, seeded
      with a small processing history, plus SQL statement capture
    - Storage Fixtures: in-memory presigner
    - GraphQL Fixtures: request context with fresh loaders

The database lives in a file under ``tmp_path`` rather than in memory:
every loader batch opens its own session, and each needs its own
connection to the same data.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Iterator
from datetime import datetime

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from processed_data.core.database import Base
from processed_data.core.settings import clear_all_caches
from processed_data.features.graphql.context import GraphQLContext
from processed_data.features.graphql.dataloaders import create_dataloaders
from processed_data.features.ispyb.models import (
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
from processed_data.infra.storage import StoragePermissionError

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Reload settings for every test so monkeypatched env vars apply."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine on a fresh SQLite file with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ispyb.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory handed to the loaders."""
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Populate the store with a small processing history.

    Data collection 1:
        files 10 (absolute path), 11 (relative path)
        jobs 100 (parameters 1000, 1001; program 200) and 101 (program 201)
        integrations 300 -> program 200, 301 -> program 201, 302 -> program 200
        program 200: AutoProc 400 (and a later 402), attachments 700-702
        AutoProc 400 -> scaling 500 with overall/innerShell/outerShell rows
        AutoProc 401 -> scaling 501 with overall and a miscased "InnerShell" row
    Data collection 2:
        file 12, job 102
    Data collection 3:
        nothing
    """
    started = datetime(2024, 5, 1, 12, 0, 0)
    async with session_factory() as session:
        session.add_all([
            DataCollectionFileAttachment(
                id=10,
                data_collection_id=1,
                file_full_path="/dls/i03/data/2024/cm1234-1/processed/fast_dp.mtz",
                file_type="output",
            ),
            DataCollectionFileAttachment(
                id=11,
                data_collection_id=1,
                file_full_path="relative/xia2.log",
                file_type="log",
            ),
            DataCollectionFileAttachment(
                id=12,
                data_collection_id=2,
                file_full_path="/dls/i04/data/2024/cm1234-2/processed/dials.mtz",
                file_type="output",
            ),
            ProcessingJob(
                id=100,
                data_collection_id=1,
                display_name="fast_dp",
                recipe="autoprocessing-fast-dp",
                automatic=True,
                record_timestamp=started,
            ),
            ProcessingJob(id=101, data_collection_id=1, display_name="xia2 dials", automatic=True),
            ProcessingJob(id=102, data_collection_id=2, display_name="xia2 3dii", automatic=False),
            ProcessingJobParameter(
                id=1000, processing_job_id=100, parameter_key="ispyb_dcid", parameter_value="1"
            ),
            ProcessingJobParameter(
                id=1001, processing_job_id=100, parameter_key="resolution", parameter_value="1.8"
            ),
            AutoProcProgram(
                id=200,
                processing_programs="fast_dp",
                processing_status=1,
                processing_start_time=started,
                processing_job_id=100,
            ),
            AutoProcProgram(id=201, processing_programs="xia2 dials", processing_job_id=101),
            AutoProcIntegration(id=300, data_collection_id=1, auto_proc_program_id=200),
            AutoProcIntegration(id=301, data_collection_id=1, auto_proc_program_id=201),
            AutoProcIntegration(id=302, data_collection_id=1, auto_proc_program_id=200),
            AutoProc(id=400, auto_proc_program_id=200, space_group="P 21 21 21", refined_cell_a=78.1),
            AutoProc(id=401, auto_proc_program_id=201, space_group="C 1 2 1"),
            AutoProc(id=402, auto_proc_program_id=200, space_group="P 1"),
            AutoProcScaling(id=500, auto_proc_id=400),
            AutoProcScaling(id=501, auto_proc_id=401),
            AutoProcScalingStatistics(
                id=600,
                auto_proc_scaling_id=500,
                scaling_statistics_type="overall",
                cc_half=0.998,
                completeness=99.8,
            ),
            AutoProcScalingStatistics(
                id=601, auto_proc_scaling_id=500, scaling_statistics_type="innerShell", cc_half=0.999
            ),
            AutoProcScalingStatistics(
                id=602, auto_proc_scaling_id=500, scaling_statistics_type="outerShell", cc_half=0.61
            ),
            AutoProcScalingStatistics(
                id=603, auto_proc_scaling_id=501, scaling_statistics_type="overall", cc_half=0.97
            ),
            AutoProcScalingStatistics(
                id=604, auto_proc_scaling_id=501, scaling_statistics_type="InnerShell", cc_half=0.5
            ),
            AutoProcProgramAttachment(
                id=700,
                auto_proc_program_id=200,
                file_type="Log",
                file_name="fast_dp.log",
                file_path="/dls/i03/data/2024/cm1234-1/processed/fast_dp/",
                importance_rank=2,
            ),
            AutoProcProgramAttachment(
                id=701,
                auto_proc_program_id=200,
                file_type="Result",
                file_name="fast_dp.mtz",
                file_path="/dls/i03/data/2024/cm1234-1/processed/fast_dp",
                importance_rank=1,
            ),
            AutoProcProgramAttachment(
                id=702,
                auto_proc_program_id=200,
                file_type="Graph",
                file_name="plot.json",
                file_path="relative/fast_dp",
            ),
        ])
        await session.commit()


@pytest.fixture
def statements(db_engine: AsyncEngine) -> Iterator[list[str]]:
    """Capture every SQL statement executed after the fixture starts."""
    captured: list[str] = []

    def _capture(conn, cursor, statement, parameters, context, executemany) -> None:
        captured.append(statement)

    event.listen(db_engine.sync_engine, "before_cursor_execute", _capture)
    yield captured
    event.remove(db_engine.sync_engine, "before_cursor_execute", _capture)


def selects_from(statements: list[str], table: str) -> list[str]:
    """Statements that read from ``table``."""
    return [s for s in statements if s.lstrip().upper().startswith("SELECT") and f'FROM "{table}"' in s]


# ============================================================================
# Storage Fixtures
# ============================================================================


class FakeStorage:
    """Presigner returning predictable URLs and recording every key signed."""

    bucket = "test-bucket"

    def __init__(self, failing_keys: set[str] | None = None) -> None:
        self.failing_keys = failing_keys or set()
        self.signed: list[str] = []

    async def get_presigned_url(self, key: str, expires_in: int | None = None) -> str:
        if key in self.failing_keys:
            raise StoragePermissionError(f"Presigned_url failed: AccessDenied for {key}")
        self.signed.append(key)
        return f"https://s3.test/{self.bucket}/{key}?X-Amz-Expires={expires_in or 600}"


@pytest.fixture
def storage() -> FakeStorage:
    """Storage double that signs every key."""
    return FakeStorage()


# ============================================================================
# GraphQL Fixtures
# ============================================================================


@pytest.fixture
def graphql_context(
    session_factory: async_sessionmaker[AsyncSession],
    storage: FakeStorage,
) -> GraphQLContext:
    """Context for one GraphQL request, with its own loaders."""
    return GraphQLContext(
        database=session_factory,
        loaders=create_dataloaders(session_factory),
        storage=storage,  # type: ignore[arg-type]
        request_id="test-request",
    )
