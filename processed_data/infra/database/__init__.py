"""Database infrastructure: engine lifecycle and session factory."""

from __future__ import annotations

from .session import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
    instrument_engine,
)

__all__ = [
    "close_database",
    "create_engine",
    "create_session_factory",
    "init_database",
    "instrument_engine",
]
