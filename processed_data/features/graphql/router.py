"""GraphQL router for FastAPI integration.

Provides:
- POST / executes GraphQL operations (gateway and direct clients)
- GET / serves the configured GraphQL IDE
- A fresh context with its own DataLoaders for every request
"""

from __future__ import annotations

import logging
from typing import Any, cast
from uuid import uuid4

from fastapi import APIRouter, BackgroundTasks, Request, Response
from strawberry.fastapi import GraphQLRouter

from processed_data.core.exceptions import ServiceUnavailableException
from processed_data.core.settings import get_graphql_settings
from processed_data.features.graphql.context import GraphQLContext
from processed_data.features.graphql.dataloaders import create_dataloaders
from processed_data.features.graphql.schema import schema
from processed_data.infra.logging import set_log_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
) -> GraphQLContext:
    """Create GraphQL context from the application state.

    The session factory and storage client are created once by the
    lifespan; the loaders are created here so nothing cached outlives
    the request.

    Args:
        request: FastAPI request
        response: FastAPI response
        background_tasks: FastAPI background tasks

    Returns:
        GraphQLContext for use in resolvers
    """
    state = request.app.state
    database = getattr(state, "session_factory", None)
    if database is None:
        raise ServiceUnavailableException("Database is not initialized")

    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
    response.headers[REQUEST_ID_HEADER] = request_id
    set_log_context(request_id=request_id)

    settings = get_graphql_settings()
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        database=database,
        loaders=create_dataloaders(database, max_batch_size=settings.dataloader_max_batch_size),
        storage=getattr(state, "storage", None),
        request_id=request_id,
    )


def create_graphql_router() -> APIRouter:
    """Create GraphQL router with settings-based configuration."""
    settings = get_graphql_settings()

    graphql_app = GraphQLRouter(
        schema,
        path=settings.path,
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.graphql_ide or None,
    )

    router = APIRouter(tags=["graphql"])
    router.include_router(graphql_app)
    logger.debug(
        "GraphQL router created",
        extra={"path": settings.path, "graphql_ide": settings.graphql_ide},
    )
    return router


__all__ = ["create_graphql_router", "get_graphql_context"]
