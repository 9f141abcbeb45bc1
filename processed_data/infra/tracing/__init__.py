"""Distributed tracing."""

from __future__ import annotations

from .opentelemetry import (
    instrument_app,
    instrument_database,
    setup_tracing,
    shutdown_tracing,
)

__all__ = [
    "instrument_app",
    "instrument_database",
    "setup_tracing",
    "shutdown_tracing",
]
