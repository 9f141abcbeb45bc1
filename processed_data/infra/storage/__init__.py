"""Object storage: key construction and presigned download URLs."""

from __future__ import annotations

from .client import StorageClient
from .exceptions import (
    StorageError,
    StorageNotConfiguredError,
    StoragePermissionError,
    StorageTimeoutError,
    StorageValidationError,
    map_boto_error,
)
from .path import object_key, object_key_from_path

__all__ = [
    "StorageClient",
    "StorageError",
    "StorageNotConfiguredError",
    "StoragePermissionError",
    "StorageTimeoutError",
    "StorageValidationError",
    "map_boto_error",
    "object_key",
    "object_key_from_path",
]
