"""Storage-specific exceptions for S3 signing operations.

Signing errors surface as field errors on ``downloadUrl`` only, so every
exception here carries a stable ``code`` for clients and log queries.

Example:
    ```python
    try:
        url = await s3.generate_presigned_url("get_object", ...)
    except ClientError as e:
        raise map_boto_error(e, operation="presigned_url", key=key) from e
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from processed_data.core.exceptions import AppException

if TYPE_CHECKING:
    from botocore.exceptions import ClientError


class StorageError(AppException):
    """Base exception for all storage-related errors.

    Attributes:
        code: Error code identifier for programmatic error handling.
        message: Human-readable error message.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 500,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error message.
            code: Error code for programmatic handling.
            status_code: HTTP status code (default: 500).
            metadata: Additional error context.
        """
        self.code = code
        self.message = message
        super().__init__(
            status_code=status_code,
            detail=message,
            type=code.lower().replace("_", "-"),
            extra=metadata or {},
        )


class StorageNotConfiguredError(StorageError):
    """Raised when a URL is requested but no bucket/client is configured."""

    def __init__(
        self,
        message: str = "Object storage is not configured",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_CONFIGURED",
            status_code=503,
            metadata=metadata,
        )


class StoragePermissionError(StorageError):
    """Raised when credentials are missing, invalid or expired."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_PERMISSION_DENIED",
            status_code=403,
            metadata=metadata,
        )


class StorageTimeoutError(StorageError):
    """Raised when the object store does not answer in time."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_TIMEOUT",
            status_code=504,
            metadata=metadata,
        )


class StorageValidationError(StorageError):
    """Raised for keys or requests the object store rejects as invalid."""

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_VALIDATION_ERROR",
            status_code=400,
            metadata=metadata,
        )


_PERMISSION_CODES = frozenset({
    "AccessDenied",
    "ExpiredToken",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "InvalidToken",
    "TokenRefreshRequired",
})
_TIMEOUT_CODES = frozenset({"RequestTimeout", "RequestTimeTooSkewed", "SlowDown"})
_VALIDATION_CODES = frozenset({
    "InvalidRequest",
    "InvalidArgument",
    "InvalidBucketName",
    "KeyTooLongError",
})


def map_boto_error(
    error: ClientError,
    operation: str,
    key: str | None = None,
) -> StorageError:
    """Map a botocore ClientError to a domain-specific StorageError.

    Args:
        error: The botocore ClientError exception to map.
        operation: The storage operation being performed (e.g., "presigned_url").
        key: Optional object key being operated on.

    Returns:
        StorageError: Appropriate domain-specific storage exception.

    Error Code Mappings:
        - AccessDenied, ExpiredToken, InvalidAccessKeyId, ... -> StoragePermissionError (403)
        - RequestTimeout, RequestTimeTooSkewed, SlowDown -> StorageTimeoutError (504)
        - InvalidRequest, InvalidArgument, ... -> StorageValidationError (400)
        - Others -> StorageError (500)
    """
    error_info = error.response.get("Error", {})
    error_code = error_info.get("Code", "Unknown")
    error_message = error_info.get("Message", str(error))

    metadata: dict[str, Any] = {
        "operation": operation,
        "aws_error_code": error_code,
        "aws_error_message": error_message,
    }
    if key:
        metadata["key"] = key

    message = f"{operation.capitalize()} failed: {error_message}"

    if error_code in _PERMISSION_CODES:
        return StoragePermissionError(message=message, metadata=metadata)
    if error_code in _TIMEOUT_CODES:
        return StorageTimeoutError(message=message, metadata=metadata)
    if error_code in _VALIDATION_CODES:
        return StorageValidationError(message=message, metadata=metadata)

    return StorageError(
        message=message,
        code="STORAGE_ERROR",
        status_code=500,
        metadata=metadata,
    )
