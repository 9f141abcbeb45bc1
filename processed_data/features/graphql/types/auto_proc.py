"""GraphQL types for automatic processing results.

Covers the AutoProc* table family: programs and the files they wrote,
integrations of a data collection, the AutoProc result with its unit
cell, the scaling step and its per-shell statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

import strawberry
from strawberry.types import Info

from processed_data.features.graphql.context import GraphQLContext
from processed_data.features.graphql.types.enums import StatisticsType
from processed_data.features.ispyb.models import (
    AutoProc as AutoProcModel,
)
from processed_data.features.ispyb.models import (
    AutoProcIntegration as AutoProcIntegrationModel,
)
from processed_data.features.ispyb.models import (
    AutoProcProgram as AutoProcProgramModel,
)
from processed_data.features.ispyb.models import (
    AutoProcProgramAttachment as AutoProcProgramAttachmentModel,
)
from processed_data.features.ispyb.models import (
    AutoProcScaling as AutoProcScalingModel,
)
from processed_data.features.ispyb.models import (
    AutoProcScalingStatistics as AutoProcScalingStatisticsModel,
)
from processed_data.infra.storage import object_key

StatisticsTypeArg = Annotated[
    StatisticsType,
    strawberry.argument(name="type", description="Resolution shell to fetch"),
]


@strawberry.type(description="Data reduction statistics of one resolution shell")
class AutoProcScalingStatistics:
    id: int = strawberry.field(description="Unique identifier of the statistics row")
    auto_proc_scaling_id: int | None
    statistics_type: StatisticsType | None = strawberry.field(
        name="type",
        description="Resolution shell these statistics describe",
    )
    comments: str | None
    resolution_limit_low: float | None
    resolution_limit_high: float | None
    r_merge: float | None
    r_meas_all_i_plus_i_minus: float | None
    mean_i_over_sig_i: float | None
    n_total_observations: int | None
    n_total_unique_observations: int | None
    completeness: float | None
    multiplicity: float | None
    anomalous_completeness: float | None
    anomalous_multiplicity: float | None
    cc_half: float | None
    cc_anomalous: float | None
    res_i_over_sig_i2: float | None

    @classmethod
    def from_model(cls, model: AutoProcScalingStatisticsModel) -> AutoProcScalingStatistics:
        try:
            statistics_type = StatisticsType.from_literal(model.scaling_statistics_type)
        except ValueError:
            statistics_type = None
        return cls(
            id=model.id,
            auto_proc_scaling_id=model.auto_proc_scaling_id,
            statistics_type=statistics_type,
            comments=model.comments,
            resolution_limit_low=model.resolution_limit_low,
            resolution_limit_high=model.resolution_limit_high,
            r_merge=model.r_merge,
            r_meas_all_i_plus_i_minus=model.r_meas_all_i_plus_i_minus,
            mean_i_over_sig_i=model.mean_i_over_sig_i,
            n_total_observations=model.n_total_observations,
            n_total_unique_observations=model.n_total_unique_observations,
            completeness=model.completeness,
            multiplicity=model.multiplicity,
            anomalous_completeness=model.anomalous_completeness,
            anomalous_multiplicity=model.anomalous_multiplicity,
            cc_half=model.cc_half,
            cc_anomalous=model.cc_anomalous,
            res_i_over_sig_i2=model.res_i_over_sig_i2,
        )


@strawberry.type(description="Scaling step of an automatic processing result")
class AutoProcScaling:
    id: int = strawberry.field(description="Unique identifier of the scaling")
    auto_proc_id: int | None
    record_time_stamp: datetime | None

    @classmethod
    def from_model(cls, model: AutoProcScalingModel) -> AutoProcScaling:
        return cls(
            id=model.id,
            auto_proc_id=model.auto_proc_id,
            record_time_stamp=model.record_time_stamp,
        )

    async def _load_statistics(
        self,
        info: Info[GraphQLContext, None],
        statistics_type: StatisticsType,
    ) -> AutoProcScalingStatistics | None:
        row = await info.context.loaders.scaling_statistics.load((self.id, statistics_type))
        return AutoProcScalingStatistics.from_model(row) if row else None

    @strawberry.field(description="Statistics over the full resolution range")
    async def overall(
        self, info: Info[GraphQLContext, None]
    ) -> AutoProcScalingStatistics | None:
        return await self._load_statistics(info, StatisticsType.OVERALL)

    @strawberry.field(description="Statistics of the low resolution shell")
    async def inner_shell(
        self, info: Info[GraphQLContext, None]
    ) -> AutoProcScalingStatistics | None:
        return await self._load_statistics(info, StatisticsType.INNER_SHELL)

    @strawberry.field(description="Statistics of the high resolution shell")
    async def outer_shell(
        self, info: Info[GraphQLContext, None]
    ) -> AutoProcScalingStatistics | None:
        return await self._load_statistics(info, StatisticsType.OUTER_SHELL)

    @strawberry.field(description="Statistics of the requested resolution shell")
    async def statistics(
        self,
        info: Info[GraphQLContext, None],
        statistics_type: StatisticsTypeArg,
    ) -> AutoProcScalingStatistics | None:
        """Fetch one shell chosen by argument.

        Several ``statistics`` selections under sibling scalings are
        batched into a single fetch over the exact (scaling, shell)
        pairs requested.
        """
        return await self._load_statistics(info, statistics_type)


@strawberry.type(description="Space group and refined unit cell of a processing result")
class AutoProc:
    id: int = strawberry.field(description="Unique identifier of the result")
    auto_proc_program_id: int | None
    space_group: str | None
    refined_cell_a: float | None
    refined_cell_b: float | None
    refined_cell_c: float | None
    refined_cell_alpha: float | None
    refined_cell_beta: float | None
    refined_cell_gamma: float | None

    @classmethod
    def from_model(cls, model: AutoProcModel) -> AutoProc:
        return cls(
            id=model.id,
            auto_proc_program_id=model.auto_proc_program_id,
            space_group=model.space_group,
            refined_cell_a=model.refined_cell_a,
            refined_cell_b=model.refined_cell_b,
            refined_cell_c=model.refined_cell_c,
            refined_cell_alpha=model.refined_cell_alpha,
            refined_cell_beta=model.refined_cell_beta,
            refined_cell_gamma=model.refined_cell_gamma,
        )

    @strawberry.field(description="Scaling of this result")
    async def scaling(self, info: Info[GraphQLContext, None]) -> AutoProcScaling | None:
        scaling = await info.context.loaders.auto_proc_scaling.load(self.id)
        return AutoProcScaling.from_model(scaling) if scaling else None


@strawberry.type(description="A file written by a processing program")
class AutoProcProgramAttachment:
    id: int = strawberry.field(description="Unique identifier of the attachment")
    auto_proc_program_id: int
    file_type: str | None
    file_name: str | None
    file_path: str | None
    importance_rank: int | None

    @classmethod
    def from_model(cls, model: AutoProcProgramAttachmentModel) -> AutoProcProgramAttachment:
        return cls(
            id=model.id,
            auto_proc_program_id=model.auto_proc_program_id,
            file_type=model.file_type,
            file_name=model.file_name,
            file_path=model.file_path,
            importance_rank=model.importance_rank,
        )

    @strawberry.field(description="Time limited download link for the file")
    async def download_url(self, info: Info[GraphQLContext, None]) -> str | None:
        """Sign the object key built from the stored directory and file name.

        Returns:
            Presigned URL, or None when the row does not name a file.
        """
        if self.file_path is None or self.file_name is None:
            return None
        storage = info.context.require_storage()
        return await storage.get_presigned_url(object_key(self.file_path, self.file_name))


@strawberry.type(description="A run of an automatic processing program")
class AutoProcProgram:
    id: int = strawberry.field(description="Unique identifier of the program run")
    processing_command_line: str | None
    processing_programs: str | None
    processing_status: int | None = strawberry.field(
        description="1 on success, 0 on failure, null while running",
    )
    processing_message: str | None
    processing_start_time: datetime | None
    processing_end_time: datetime | None
    processing_environment: str | None
    processing_job_id: int | None

    @classmethod
    def from_model(cls, model: AutoProcProgramModel) -> AutoProcProgram:
        return cls(
            id=model.id,
            processing_command_line=model.processing_command_line,
            processing_programs=model.processing_programs,
            processing_status=model.processing_status,
            processing_message=model.processing_message,
            processing_start_time=model.processing_start_time,
            processing_end_time=model.processing_end_time,
            processing_environment=model.processing_environment,
            processing_job_id=model.processing_job_id,
        )

    @strawberry.field(description="Result produced by this program run")
    async def auto_proc(self, info: Info[GraphQLContext, None]) -> AutoProc | None:
        auto_proc = await info.context.loaders.auto_proc.load(self.id)
        return AutoProc.from_model(auto_proc) if auto_proc else None

    @strawberry.field(description="Files written by this program run, most important first")
    async def attachments(
        self, info: Info[GraphQLContext, None]
    ) -> list[AutoProcProgramAttachment] | None:
        attachments = await info.context.loaders.program_attachments.load(self.id)
        return [AutoProcProgramAttachment.from_model(a) for a in attachments]


@strawberry.type(description="Integration of a data collection by a processing program")
class AutoProcIntegration:
    id: int = strawberry.field(description="Unique identifier of the integration")
    data_collection_id: int
    auto_proc_program_id: int | None
    start_image_number: int | None
    end_image_number: int | None
    refined_detector_distance: float | None
    refined_x_beam: float | None
    refined_y_beam: float | None

    @classmethod
    def from_model(cls, model: AutoProcIntegrationModel) -> AutoProcIntegration:
        return cls(
            id=model.id,
            data_collection_id=model.data_collection_id,
            auto_proc_program_id=model.auto_proc_program_id,
            start_image_number=model.start_image_number,
            end_image_number=model.end_image_number,
            refined_detector_distance=model.refined_detector_distance,
            refined_x_beam=model.refined_x_beam,
            refined_y_beam=model.refined_y_beam,
        )

    @strawberry.field(description="Program that performed this integration")
    async def auto_proc_program(
        self, info: Info[GraphQLContext, None]
    ) -> AutoProcProgram | None:
        if self.auto_proc_program_id is None:
            return None
        program = await info.context.loaders.auto_proc_program.load(self.auto_proc_program_id)
        return AutoProcProgram.from_model(program) if program else None


__all__ = [
    "AutoProc",
    "AutoProcIntegration",
    "AutoProcProgram",
    "AutoProcProgramAttachment",
    "AutoProcScaling",
    "AutoProcScalingStatistics",
    "StatisticsTypeArg",
]
