"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Session factory for the relational store (shared, read-only)
- Storage client for download URLs (shared, optional)
- DataLoaders (request-scoped, never reused)
- Request ID (for log correlation)

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

from processed_data.infra.storage import StorageClient, StorageNotConfiguredError

if TYPE_CHECKING:
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from processed_data.features.graphql.dataloaders import DataLoaders
    from processed_data.features.graphql.dataloaders.base import Database


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Standard fields (per Strawberry docs):
    - request: The HTTP request
    - response: The HTTP response
    - background_tasks: FastAPI BackgroundTasks

    Custom fields:
    - database: Session factory the loaders open batch sessions from
    - loaders: DataLoaders for this request
    - storage: Presigning client, None when no bucket is configured
    - request_id: Correlates log lines of one request

    Example usage in resolver:
        @strawberry.field
        async def processing_jobs(self, info: Info[GraphQLContext, None]) -> list[ProcessingJob]:
            jobs = await info.context.loaders.processing_jobs.load(self.id)
            return [ProcessingJob.from_model(job) for job in jobs]
    """

    # Standard Strawberry/FastAPI context fields
    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    # Custom application fields
    database: Database = field(default=None)  # type: ignore[assignment]
    loaders: DataLoaders = field(default=None)  # type: ignore[assignment]
    storage: StorageClient | None = None
    request_id: str | None = None

    def require_storage(self) -> StorageClient:
        """Return the storage client or fail the calling field.

        Raises:
            StorageNotConfiguredError: If no bucket is configured.
        """
        if self.storage is None:
            raise StorageNotConfiguredError
        return self.storage


__all__ = ["GraphQLContext"]
