"""Async engine and session factory for the ISPyB database.

The engine is built once at application startup and its session factory
is the data-access handle handed to every request's loaders. Each batched
fetch opens its own short-lived session from the factory, so sibling
batches of one request can run concurrently on separate pooled
connections.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from processed_data.infra.metrics.prometheus import (
    database_query_duration_seconds,
    database_slow_queries_total,
)

if TYPE_CHECKING:
    from processed_data.core.settings.database import DatabaseSettings

logger = logging.getLogger(__name__)

SLOW_QUERY_SECONDS = 1.0


def create_engine(db_settings: DatabaseSettings) -> AsyncEngine:
    """Create the async engine described by the database settings.

    Args:
        db_settings: Database settings (URL and pool options).

    Returns:
        Engine with query-duration metrics attached.
    """
    engine = create_async_engine(db_settings.url, **db_settings.engine_kwargs())
    instrument_engine(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the read-only session factory used by relationship fetchers."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def instrument_engine(engine: AsyncEngine) -> None:
    """Record query durations, linked to the current trace via exemplars."""
    sync_engine = engine.sync_engine
    if event.contains(sync_engine, "before_cursor_execute", _before_cursor_execute):
        return
    event.listen(sync_engine, "before_cursor_execute", _before_cursor_execute)
    event.listen(sync_engine, "after_cursor_execute", _after_cursor_execute)


def _before_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    _ = conn, cursor, statement, parameters, executemany
    context._query_start_time = time.perf_counter()


def _after_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    _ = conn, cursor, parameters, executemany
    duration = time.perf_counter() - context._query_start_time

    # "SELECT ..." -> "SELECT"
    operation = statement.lstrip().split(None, 1)[0].upper() if statement.strip() else "UNKNOWN"

    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        trace_id = format(span.get_span_context().trace_id, "032x")
        database_query_duration_seconds.labels(operation=operation).observe(
            duration, exemplar={"trace_id": trace_id}
        )
    else:
        database_query_duration_seconds.labels(operation=operation).observe(duration)

    if duration > SLOW_QUERY_SECONDS:
        database_slow_queries_total.labels(operation=operation).inc()
        logger.warning(
            "Slow query",
            extra={"operation": operation, "duration_seconds": round(duration, 3)},
        )


async def init_database(engine: AsyncEngine) -> None:
    """Verify the database is reachable.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the connectivity check fails.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(
            "Failed to connect to database",
            extra={"url": engine.url.render_as_string(hide_password=True), "error": str(e)},
        )
        raise
    logger.info(
        "Database connection established successfully",
        extra={"url": engine.url.render_as_string(hide_password=True)},
    )


async def close_database(engine: AsyncEngine) -> None:
    """Dispose of the engine's pool during application shutdown."""
    logger.info("Closing database connection")
    await engine.dispose()


__all__ = [
    "close_database",
    "create_engine",
    "create_session_factory",
    "init_database",
    "instrument_engine",
]
