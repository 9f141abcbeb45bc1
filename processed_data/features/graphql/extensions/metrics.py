"""Prometheus metrics extension for GraphQL operations.

Records request rates, latencies and error counts per operation, plus
DataLoader batching efficiency (loads issued versus batches fetched).

Usage:
    from processed_data.features.graphql.extensions.metrics import GraphQLMetricsExtension

    extensions = [
        GraphQLMetricsExtension,
    ]
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator

from prometheus_client import Counter, Gauge, Histogram
from strawberry.extensions import SchemaExtension

from processed_data.infra.metrics.prometheus import DEFAULT_LATENCY_BUCKETS, REGISTRY

logger = logging.getLogger(__name__)

__all__ = [
    "GRAPHQL_METRICS",
    "GraphQLMetricsExtension",
    "record_dataloader_batch",
    "record_dataloader_load",
]


class GraphQLMetrics:
    """Container for the GraphQL Prometheus metrics."""

    def __init__(self) -> None:
        # Request metrics
        self.requests_total = Counter(
            "graphql_requests_total",
            "Total number of GraphQL requests",
            labelnames=["operation_type", "operation_name", "status"],
            registry=REGISTRY,
        )

        self.request_duration_seconds = Histogram(
            "graphql_request_duration_seconds",
            "GraphQL request duration in seconds",
            labelnames=["operation_type", "operation_name"],
            buckets=DEFAULT_LATENCY_BUCKETS,
            registry=REGISTRY,
        )

        self.errors_total = Counter(
            "graphql_errors_total",
            "Total number of GraphQL errors",
            labelnames=["operation_type", "operation_name", "error_code"],
            registry=REGISTRY,
        )

        self.active_requests = Gauge(
            "graphql_active_requests",
            "Number of currently executing GraphQL operations",
            labelnames=["operation_type"],
            registry=REGISTRY,
        )

        # DataLoader metrics
        self.dataloader_batch_size = Histogram(
            "graphql_dataloader_batch_size",
            "DataLoader batch size distribution",
            labelnames=["loader_name"],
            buckets=(1, 2, 5, 10, 20, 50, 100, 200, 500),
            registry=REGISTRY,
        )

        self.dataloader_loads_total = Counter(
            "graphql_dataloader_loads_total",
            "Total number of DataLoader load calls",
            labelnames=["loader_name"],
            registry=REGISTRY,
        )

        self.dataloader_batches_total = Counter(
            "graphql_dataloader_batches_total",
            "Total number of DataLoader batch executions",
            labelnames=["loader_name"],
            registry=REGISTRY,
        )


GRAPHQL_METRICS = GraphQLMetrics()


class GraphQLMetricsExtension(SchemaExtension):
    """Record duration, outcome and error codes of each executed operation.

    Field errors do not fail the operation as a whole; an operation with
    any error in its result is counted with ``status="error"``.
    """

    def on_execute(self) -> Iterator[None]:
        execution_context = self.execution_context
        operation_type = _operation_type(execution_context)
        operation_name = execution_context.operation_name or "anonymous"

        GRAPHQL_METRICS.active_requests.labels(operation_type=operation_type).inc()
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            GRAPHQL_METRICS.active_requests.labels(operation_type=operation_type).dec()
            GRAPHQL_METRICS.request_duration_seconds.labels(
                operation_type=operation_type,
                operation_name=operation_name,
            ).observe(duration)

            result = execution_context.result
            errors = (result.errors if result else None) or []
            GRAPHQL_METRICS.requests_total.labels(
                operation_type=operation_type,
                operation_name=operation_name,
                status="error" if errors else "success",
            ).inc()

            for error in errors:
                error_code = "unknown"
                original = error.original_error
                if original is not None:
                    error_code = getattr(original, "type", None) or type(original).__name__
                GRAPHQL_METRICS.errors_total.labels(
                    operation_type=operation_type,
                    operation_name=operation_name,
                    error_code=error_code,
                ).inc()


def _operation_type(execution_context) -> str:
    operation_type = execution_context.operation_type
    return operation_type.value if operation_type is not None else "unknown"


def record_dataloader_batch(loader_name: str, batch_size: int) -> None:
    """Record DataLoader batch execution.

    Args:
        loader_name: Name of the DataLoader
        batch_size: Number of keys in the batch
    """
    GRAPHQL_METRICS.dataloader_batch_size.labels(loader_name=loader_name).observe(batch_size)
    GRAPHQL_METRICS.dataloader_batches_total.labels(loader_name=loader_name).inc()


def record_dataloader_load(loader_name: str) -> None:
    """Record a DataLoader load call.

    Args:
        loader_name: Name of the DataLoader
    """
    GRAPHQL_METRICS.dataloader_loads_total.labels(loader_name=loader_name).inc()
