"""Strawberry extensions for limits, error masking and observability."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial

from graphql import GraphQLError
from strawberry.extensions import MaskErrors, QueryDepthLimiter, SchemaExtension

from processed_data.core.exceptions import AppException
from processed_data.core.settings import get_app_settings, get_graphql_settings
from processed_data.features.graphql.extensions.metrics import (
    GRAPHQL_METRICS,
    GraphQLMetricsExtension,
    record_dataloader_batch,
    record_dataloader_load,
)
from processed_data.features.graphql.extensions.tracing import (
    GraphQLTracingExtension,
    get_graphql_tracer,
)

logger = logging.getLogger(__name__)

MASKED_ERROR_MESSAGE = "Unexpected error."

# Strawberry builds a fresh extension per operation from a class or zero-argument factory
ExtensionFactory = type[SchemaExtension] | Callable[[], SchemaExtension]


def should_mask_error(error: GraphQLError) -> bool:
    """Mask everything except errors the service raised on purpose.

    Application errors (missing data source, bad reference, signing
    failures) carry messages meant for clients; anything else is an
    unexpected failure and its message may leak internals.
    """
    original = error.original_error
    if original is None:
        return False
    return not isinstance(original, AppException)


def get_extensions() -> list[ExtensionFactory]:
    """Get list of Strawberry extensions for the schema.

    Returns:
        Extension classes, and factories for extensions that take options
    """
    settings = get_graphql_settings()
    app_settings = get_app_settings()

    extensions: list[ExtensionFactory] = [
        partial(QueryDepthLimiter, max_depth=settings.max_query_depth),
        GraphQLTracingExtension,
        GraphQLMetricsExtension,
    ]
    mask = settings.should_mask_errors(app_settings.environment)
    if mask:
        extensions.append(
            partial(
                MaskErrors,
                should_mask_error=should_mask_error,
                error_message=MASKED_ERROR_MESSAGE,
            )
        )

    logger.debug(
        "GraphQL extensions configured",
        extra={"max_query_depth": settings.max_query_depth, "mask_errors": mask},
    )
    return extensions


__all__ = [
    "GRAPHQL_METRICS",
    "ExtensionFactory",
    "GraphQLMetricsExtension",
    "GraphQLTracingExtension",
    "MASKED_ERROR_MESSAGE",
    "get_extensions",
    "get_graphql_tracer",
    "record_dataloader_batch",
    "record_dataloader_load",
    "should_mask_error",
]
