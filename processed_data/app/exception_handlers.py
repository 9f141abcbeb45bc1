"""Exception handlers for errors raised outside GraphQL execution.

Field errors are reported inside the GraphQL response. These handlers
cover failures before execution starts (e.g. building the request
context) and render them as RFC 7807 problem details.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from processed_data.core.exceptions import AppException

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def _problem_detail(exc: AppException, instance: str) -> dict[str, Any]:
    problem: dict[str, Any] = {
        "type": exc.type,
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": instance,
    }
    problem.update(exc.extra)
    return problem


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert an AppException into a problem details response."""
    log = logger.warning if exc.is_client_error else logger.error
    log(
        "Request failed: %s",
        exc.detail,
        extra={"status_code": exc.status_code, "path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_problem_detail(exc, request.url.path),
        media_type=PROBLEM_JSON,
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]


__all__ = ["app_exception_handler", "configure_exception_handlers"]
