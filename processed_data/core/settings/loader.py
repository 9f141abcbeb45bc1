"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from processed_data.core.settings.loader import get_storage_settings

    settings = get_storage_settings()  # First call: loads and validates
    settings = get_storage_settings()  # Subsequent calls: returns cached instance

Testing:
    Clear the caches to force a reload after changing the environment:
    clear_all_caches()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .database import DatabaseSettings
from .graphql import GraphQLSettings
from .logs import LoggingSettings
from .otel import OtelSettings
from .storage import StorageSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings.

    Returns:
        Validated and frozen DatabaseSettings instance.
    """
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_storage_settings() -> StorageSettings:
    """Get cached object storage settings.

    Returns:
        Validated and frozen StorageSettings instance.
    """
    return StorageSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_otel_settings() -> OtelSettings:
    """Get cached OpenTelemetry settings.

    Returns:
        Validated and frozen OtelSettings instance.
    """
    return OtelSettings()


@lru_cache(maxsize=1)
def get_graphql_settings() -> GraphQLSettings:
    """Get cached GraphQL settings.

    Returns:
        Validated and frozen GraphQLSettings instance.
    """
    return GraphQLSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    In production, prefer process restarts over cache clearing.
    """
    get_app_settings.cache_clear()
    get_db_settings.cache_clear()
    get_storage_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_otel_settings.cache_clear()
    get_graphql_settings.cache_clear()
