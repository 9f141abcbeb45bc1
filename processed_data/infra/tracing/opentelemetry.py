"""OpenTelemetry tracing setup.

Spans are exported over OTLP gRPC when ``OTEL_COLLECTOR_URL`` is set;
otherwise the API's no-op tracer stays in place and instrumentation is
skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from processed_data.core.settings import OtelSettings, get_otel_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def setup_tracing(otel_settings: OtelSettings | None = None) -> TracerProvider | None:
    """Configure OpenTelemetry tracing for the service.

    Sets up:
    - OTLP gRPC exporter pointed at the collector
    - Resource attributes with service name and version
    - TracerProvider with a parent-based ratio sampler
    - Batch span processor

    Call once at application startup. A broken exporter configuration is
    logged and tracing stays disabled; requests are still served.

    Args:
        otel_settings: Settings to use (defaults to the cached settings).

    Returns:
        The installed provider, or None when tracing is disabled.
    """
    otel_settings = otel_settings or get_otel_settings()
    if not otel_settings.is_configured:
        logger.info("OpenTelemetry tracing is disabled")
        return None

    try:
        tracer_provider = TracerProvider(
            resource=Resource(attributes=otel_settings.resource_attributes()),
            sampler=otel_settings.get_sampler(),
        )
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(**otel_settings.exporter_kwargs()))
        )
        trace.set_tracer_provider(tracer_provider)
    except Exception:
        logger.exception(
            "Failed to setup OpenTelemetry tracing",
            extra={"endpoint": otel_settings.collector_url},
        )
        return None

    logger.info(
        "OpenTelemetry tracing configured",
        extra={
            "service": otel_settings.service_name,
            "endpoint": otel_settings.collector_url,
            "sample_rate": otel_settings.sample_rate,
        },
    )
    return tracer_provider


def instrument_app(app: Any, otel_settings: OtelSettings | None = None) -> None:
    """Instrument a FastAPI application for tracing.

    Args:
        app: FastAPI application instance.
        otel_settings: Settings to use (defaults to the cached settings).
    """
    otel_settings = otel_settings or get_otel_settings()
    if not otel_settings.is_configured or not otel_settings.instrument_fastapi:
        return

    FastAPIInstrumentor.instrument_app(app, excluded_urls="metrics")
    logger.debug("FastAPI instrumentation enabled")


def instrument_database(engine: AsyncEngine, otel_settings: OtelSettings | None = None) -> None:
    """Trace every statement executed on an engine.

    Args:
        engine: Async engine whose sync core is instrumented.
        otel_settings: Settings to use (defaults to the cached settings).
    """
    otel_settings = otel_settings or get_otel_settings()
    if not otel_settings.is_configured or not otel_settings.instrument_sqlalchemy:
        return

    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    logger.debug("SQLAlchemy instrumentation enabled")


def shutdown_tracing(tracer_provider: TracerProvider | None) -> None:
    """Flush pending spans and stop the exporter."""
    if tracer_provider is None:
        return
    tracer_provider.shutdown()
    logger.debug("OpenTelemetry tracer provider shut down")


__all__ = [
    "instrument_app",
    "instrument_database",
    "setup_tracing",
    "shutdown_tracing",
]
