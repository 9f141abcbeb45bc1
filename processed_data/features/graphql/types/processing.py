"""GraphQL types for processing jobs and their parameters."""

from __future__ import annotations

from datetime import datetime

import strawberry
from strawberry.types import Info

from processed_data.features.graphql.context import GraphQLContext
from processed_data.features.graphql.types.auto_proc import AutoProcProgram
from processed_data.features.ispyb.models import ProcessingJob as ProcessingJobModel
from processed_data.features.ispyb.models import (
    ProcessingJobParameter as ProcessingJobParameterModel,
)


@strawberry.type(description="A key/value parameter of a processing job")
class ProcessingJobParameter:
    id: int = strawberry.field(description="Unique identifier of the parameter")
    processing_job_id: int | None
    parameter_key: str | None
    parameter_value: str | None

    @classmethod
    def from_model(cls, model: ProcessingJobParameterModel) -> ProcessingJobParameter:
        return cls(
            id=model.id,
            processing_job_id=model.processing_job_id,
            parameter_key=model.parameter_key,
            parameter_value=model.parameter_value,
        )


@strawberry.type(description="A request to process a data collection")
class ProcessingJob:
    id: int = strawberry.field(description="Unique identifier of the processing job")
    data_collection_id: int | None
    display_name: str | None
    comments: str | None
    recipe: str | None = strawberry.field(description="Processing recipe the job runs")
    automatic: bool | None = strawberry.field(
        description="Whether the job was triggered without user action",
    )
    record_timestamp: datetime | None

    @classmethod
    def from_model(cls, model: ProcessingJobModel) -> ProcessingJob:
        """Convert a ProcessingJob row to the GraphQL type.

        Args:
            model: ProcessingJob row

        Returns:
            ProcessingJob GraphQL type
        """
        return cls(
            id=model.id,
            data_collection_id=model.data_collection_id,
            display_name=model.display_name,
            comments=model.comments,
            recipe=model.recipe,
            automatic=model.automatic,
            record_timestamp=model.record_timestamp,
        )

    @strawberry.field(description="Parameters the job was started with")
    async def parameters(
        self, info: Info[GraphQLContext, None]
    ) -> list[ProcessingJobParameter] | None:
        parameters = await info.context.loaders.processing_job_parameters.load(self.id)
        return [ProcessingJobParameter.from_model(p) for p in parameters]

    @strawberry.field(description="Program runs started for this job")
    async def auto_proc_programs(
        self, info: Info[GraphQLContext, None]
    ) -> list[AutoProcProgram] | None:
        programs = await info.context.loaders.processing_job_programs.load(self.id)
        return [AutoProcProgram.from_model(p) for p in programs]


__all__ = ["ProcessingJob", "ProcessingJobParameter"]
