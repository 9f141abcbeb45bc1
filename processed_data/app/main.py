"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from processed_data.app.exception_handlers import configure_exception_handlers
from processed_data.app.lifespan import lifespan
from processed_data.core.settings import get_app_settings
from processed_data.features.graphql.router import create_graphql_router
from processed_data.features.metrics.router import router as metrics_router
from processed_data.infra.tracing import instrument_app


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)

    # Metrics first so the GraphQL router at / does not shadow it
    app.include_router(metrics_router)
    app.include_router(create_graphql_router())

    instrument_app(app)

    return app
