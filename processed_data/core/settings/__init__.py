"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/storage/logging/otel/graphql), each an
immutable model read once through a cached loader:

    from processed_data.core.settings import get_storage_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional, local/dev)
    3. Environment variables (production)
    4. .env file (development only)
    5. secrets_dir (Kubernetes/Docker secrets)
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_graphql_settings,
    get_logging_settings,
    get_otel_settings,
    get_storage_settings,
)
from .logs import LoggingSettings
from .otel import OtelSettings
from .storage import StorageSettings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "GraphQLSettings",
    "LoggingSettings",
    "OtelSettings",
    "StorageSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_graphql_settings",
    "get_logging_settings",
    "get_otel_settings",
    "get_storage_settings",
]
