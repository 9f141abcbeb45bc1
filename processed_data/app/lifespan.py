"""Application lifespan management.

Startup Order:
1. Core (logging, tracing)
2. Database (ISPyB, MySQL)
3. Storage (S3 presigning), only when a bucket is configured

Shutdown Order: Reverse of startup (what starts first, shuts down last)

Shared handles live on ``app.state``: ``engine``, ``session_factory``,
``storage`` and ``tracer_provider``. Everything request-scoped is built by
the GraphQL context getter.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from processed_data.core.settings import (
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_storage_settings,
)
from processed_data.infra.database import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
    instrument_engine,
)
from processed_data.infra.logging import setup_logging
from processed_data.infra.storage import StorageClient
from processed_data.infra.tracing import (
    instrument_database,
    setup_tracing,
    shutdown_tracing,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core(app: FastAPI) -> None:
    """Initialize logging and OpenTelemetry."""
    app_settings = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app_settings.service_name, "environment": app_settings.environment},
    )

    app.state.tracer_provider = setup_tracing()


async def _startup_database(app: FastAPI) -> None:
    """Create the engine and the session factory loaders draw from."""
    db = get_db_settings()

    engine = create_engine(db)
    instrument_engine(engine)
    instrument_database(engine)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    try:
        await init_database(engine)
    except Exception:
        if db.startup_require_db:
            logger.exception("Database required but unavailable, failing startup")
            raise
        logger.warning("Database unavailable, continuing in degraded mode")


async def _startup_storage(app: FastAPI) -> None:
    """Create the presigning client when a bucket is configured."""
    settings = get_storage_settings()
    app.state.storage = None

    if not settings.is_configured:
        logger.info("Object storage not configured, download URLs disabled")
        return

    storage = StorageClient(settings)
    await storage.startup()
    app.state.storage = storage


async def _shutdown_storage(app: FastAPI) -> None:
    storage: StorageClient | None = getattr(app.state, "storage", None)
    if storage is not None:
        await storage.shutdown()
        logger.info("Storage client shutdown complete")


async def _shutdown_database(app: FastAPI) -> None:
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await close_database(engine)
        logger.info("Database connection closed")


async def _shutdown_core(app: FastAPI) -> None:
    shutdown_tracing(getattr(app.state, "tracer_provider", None))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    await _startup_core(app)
    await _startup_database(app)
    await _startup_storage(app)

    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await _shutdown_storage(app)
        await _shutdown_database(app)
        await _shutdown_core(app)
        logger.info("Application shutdown complete")


__all__ = ["lifespan"]
