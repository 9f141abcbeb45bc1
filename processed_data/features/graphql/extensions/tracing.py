"""OpenTelemetry tracing extension for GraphQL operations.

Opens one ``graphql.execute`` span per operation, a child of the HTTP
server span created by the FastAPI instrumentation. DataLoader batches
show up beneath it as SQLAlchemy spans.

Usage:
    from processed_data.features.graphql.extensions.tracing import GraphQLTracingExtension

    extensions = [
        GraphQLTracingExtension,
    ]
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from strawberry.extensions import SchemaExtension

logger = logging.getLogger(__name__)

__all__ = ["GraphQLTracingExtension", "get_graphql_tracer"]

# Span attributes longer than this are truncated
MAX_DOCUMENT_LENGTH = 2000


def get_graphql_tracer() -> trace.Tracer:
    """Get OpenTelemetry tracer for GraphQL operations."""
    return trace.get_tracer("processed_data.graphql")


class GraphQLTracingExtension(SchemaExtension):
    """Wrap each GraphQL execution in a span.

    Span attributes:
    - graphql.operation.type / graphql.operation.name
    - graphql.document (opt-in, truncated)
    - graphql.request_id
    - graphql.error.count and graphql.error.message when fields failed
    """

    def __init__(self, *, include_document: bool = False) -> None:
        """Initialize tracing extension.

        Args:
            include_document: Attach the query text to the span.
        """
        self.include_document = include_document
        self.tracer = get_graphql_tracer()

    def on_execute(self) -> Iterator[None]:
        execution_context = self.execution_context
        operation_type = execution_context.operation_type
        operation_name = execution_context.operation_name or "anonymous"

        with self.tracer.start_as_current_span(
            "graphql.execute",
            kind=trace.SpanKind.INTERNAL,
            record_exception=True,
        ) as span:
            span.set_attribute(
                "graphql.operation.type",
                operation_type.value if operation_type is not None else "unknown",
            )
            span.set_attribute("graphql.operation.name", operation_name)

            if self.include_document and execution_context.query:
                document = execution_context.query
                if len(document) > MAX_DOCUMENT_LENGTH:
                    document = document[:MAX_DOCUMENT_LENGTH] + "... (truncated)"
                span.set_attribute("graphql.document", document)

            request_id = getattr(execution_context.context, "request_id", None)
            if request_id:
                span.set_attribute("graphql.request_id", request_id)

            yield

            result = execution_context.result
            if result and result.errors:
                # Partial results still return 200; the span records the failures.
                span.set_status(Status(StatusCode.ERROR, "GraphQL execution errors"))
                span.set_attribute("graphql.error.count", len(result.errors))
                span.set_attribute("graphql.error.message", result.errors[0].message)
            else:
                span.set_status(Status(StatusCode.OK))
