"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class. The fields follow
    RFC 7807 Problem Details so the same error can be rendered on an HTTP
    route or attached to a GraphQL field error.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        titles = {
            400: "Bad Request",
            404: "Not Found",
            500: "Internal Server Error",
            502: "Bad Gateway",
            503: "Service Unavailable",
            504: "Gateway Timeout",
        }
        return titles.get(status_code, "Error")

    @property
    def is_client_error(self) -> bool:
        """Whether the caller, rather than the service, caused the error."""
        return 400 <= self.status_code < 500


class BadRequestException(AppException):
    """Exception raised for malformed input."""

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=400, detail=detail, type=type, extra=extra)


class ServiceUnavailableException(AppException):
    """Exception raised when a backing service cannot serve the request."""

    def __init__(
        self,
        detail: str,
        type: str = "service-unavailable",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=503, detail=detail, type=type, extra=extra)


class DataAccessError(ServiceUnavailableException):
    """A batched relationship fetch against the relational store failed.

    Raised once per failed batch and delivered to every field waiting on
    that batch.

    Example:
        raise DataAccessError(loader="processing_jobs", key_count=12) from exc
    """

    def __init__(self, loader: str, key_count: int, reason: str | None = None) -> None:
        detail = f"Failed to load {loader} for {key_count} key(s)"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(
            detail=detail,
            type="data-access-error",
            extra={"loader": loader, "key_count": key_count},
        )
        self.loader = loader


class ReferenceResolutionError(BadRequestException):
    """A federation entity representation could not be resolved.

    Covers unknown ``__typename`` values and representations whose key
    fields are missing or malformed.
    """

    def __init__(self, type_name: str, detail: str) -> None:
        super().__init__(
            detail=f"Cannot resolve {type_name} reference: {detail}",
            type="reference-resolution-error",
            extra={"typename": type_name},
        )
        self.type_name = type_name
