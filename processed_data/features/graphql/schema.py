"""GraphQL schema assembly.

Builds the Apollo Federation 2 subgraph schema: the root query, the
``Datasets`` entity this service extends and the unresolvable
``DataProcessing`` entity, with the configured extensions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import strawberry

from processed_data.core.exceptions import AppException
from processed_data.features.graphql.extensions import ExtensionFactory, get_extensions
from processed_data.features.graphql.resolvers import Query
from processed_data.features.graphql.types import DataCollection, DataProcessing

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)


class ProcessedDataSchema(strawberry.federation.Schema):
    """Federation schema that logs field errors by category.

    Client errors (bad references, validation) are logged without a
    traceback, service-side failures with one. Partial results still go
    back to the caller.
    """

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            original = error.original_error
            extra = {"graphql_path": ".".join(str(p) for p in error.path or [])}

            if original is None:
                logger.info("GraphQL request error: %s", error.message, extra=extra)
            elif isinstance(original, AppException):
                extra["error_type"] = original.type
                if original.is_client_error:
                    logger.warning("GraphQL field error: %s", original.detail, extra=extra)
                else:
                    logger.error("GraphQL field error: %s", original.detail, extra=extra)
            else:
                logger.error(
                    "Unexpected GraphQL resolver error",
                    exc_info=original,
                    extra=extra,
                )


def create_schema(
    extensions: Sequence[ExtensionFactory] | None = None,
) -> ProcessedDataSchema:
    """Create the subgraph schema.

    Args:
        extensions: Override the configured extensions (classes or
            zero-argument factories).

    Returns:
        Federation 2 schema (the Strawberry default)
    """
    return ProcessedDataSchema(
        query=Query,
        types=[DataCollection, DataProcessing],
        extensions=get_extensions() if extensions is None else list(extensions),
    )


def export_sdl(path: Path | None = None) -> str:
    """Render the subgraph SDL used for supergraph composition.

    Args:
        path: Also write the SDL to this file.

    Returns:
        Schema definition language text
    """
    sdl = schema.as_str()
    if path is not None:
        path.write_text(sdl + "\n", encoding="utf-8")
        logger.info("Wrote schema to %s", path)
    return sdl


schema = create_schema()

__all__ = ["ProcessedDataSchema", "create_schema", "export_sdl", "schema"]
