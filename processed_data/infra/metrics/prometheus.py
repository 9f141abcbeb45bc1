"""Prometheus metrics for monitoring the service."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry, served by GET /metrics
REGISTRY = CollectorRegistry()

# Covers query times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

database_query_duration_seconds = Histogram(
    "database_query_duration_seconds",
    "Database query execution time in seconds",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

database_slow_queries_total = Counter(
    "database_slow_queries_total",
    "Database queries slower than one second",
    ["operation"],
    registry=REGISTRY,
)

storage_presigned_urls_total = Counter(
    "storage_presigned_urls_total",
    "Presigned download URLs generated, by outcome",
    ["status"],
    registry=REGISTRY,
)
