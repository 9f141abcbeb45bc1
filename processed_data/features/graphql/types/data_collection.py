"""Federation entity types owned by, or extended in, this subgraph.

``Datasets`` is the data collection entity of the supergraph. The
gateway hands this service a representation holding only ``id``; the
relationship fields below are what this subgraph contributes to it.

``DataProcessing`` is a processed file of a data collection. Other
subgraphs may reference it by ``id`` but cannot ask this service to
resolve it (the key is declared unresolvable).
"""

from __future__ import annotations

import logging
from typing import Any

import strawberry
from strawberry.federation.schema_directives import Key
from strawberry.types import Info

from processed_data.features.graphql.context import GraphQLContext
from processed_data.features.graphql.types.auto_proc import AutoProcIntegration, AutoProcProgram
from processed_data.features.graphql.types.processing import ProcessingJob
from processed_data.features.ispyb.models import DataCollectionFileAttachment
from processed_data.infra.storage import object_key_from_path

logger = logging.getLogger(__name__)


@strawberry.federation.type(
    keys=[Key(fields="id", resolvable=False)],
    description="A processed file stored in the object store",
)
class DataProcessing:
    id: int = strawberry.field(description="Unique identifier of the file attachment")
    file_type: str | None = strawberry.field(description="ISPyB file type of the attachment")
    file_full_path: strawberry.Private[str]

    @classmethod
    def from_model(cls, model: DataCollectionFileAttachment) -> DataProcessing:
        """Convert a file attachment row to the GraphQL type.

        Args:
            model: DataCollectionFileAttachment row

        Returns:
            DataProcessing with the stored path kept private
        """
        return cls(
            id=model.id,
            file_type=model.file_type,
            file_full_path=model.file_full_path,
        )

    @property
    def object_key(self) -> str:
        """Object store key of the file."""
        return object_key_from_path(self.file_full_path)

    @strawberry.field(description="Time limited download link for the file")
    async def download_url(self, info: Info[GraphQLContext, None]) -> str | None:
        """Sign a ``get_object`` URL for this file.

        Each row is signed on its own; a signing failure nulls this field
        only.
        """
        storage = info.context.require_storage()
        return await storage.get_presigned_url(self.object_key)


@strawberry.federation.type(
    name="Datasets",
    keys=["id"],
    description="Data collection, extended with its processing results",
)
class DataCollection:
    id: int = strawberry.field(description="Unique identifier of the data collection")

    @classmethod
    def resolve_reference(cls, **representation: Any) -> DataCollection:
        """Build the entity from a gateway representation.

        Only the key is read; nested fields are loaded when selected.
        """
        from processed_data.features.graphql.resolvers.federation import (
            resolve_entity_reference,
        )

        return resolve_entity_reference("Datasets", representation)

    @strawberry.field(description="Processed files attached to the data collection")
    async def processed_data(
        self, info: Info[GraphQLContext, None]
    ) -> list[DataProcessing] | None:
        attachments = await info.context.loaders.processed_data.load(self.id)
        return [DataProcessing.from_model(a) for a in attachments]

    @strawberry.field(description="Processing jobs requested for the data collection")
    async def processing_jobs(
        self, info: Info[GraphQLContext, None]
    ) -> list[ProcessingJob] | None:
        jobs = await info.context.loaders.processing_jobs.load(self.id)
        return [ProcessingJob.from_model(job) for job in jobs]

    @strawberry.field(description="Integrations of the data collection")
    async def auto_proc_integration(
        self, info: Info[GraphQLContext, None]
    ) -> list[AutoProcIntegration] | None:
        integrations = await info.context.loaders.auto_proc_integrations.load(self.id)
        return [AutoProcIntegration.from_model(i) for i in integrations]

    @strawberry.field(description="Programs that integrated the data collection")
    async def auto_proc_programs(
        self, info: Info[GraphQLContext, None]
    ) -> list[AutoProcProgram] | None:
        programs = await info.context.loaders.data_collection_programs.load(self.id)
        return [AutoProcProgram.from_model(p) for p in programs]


__all__ = ["DataCollection", "DataProcessing"]
