"""SQLAlchemy models for the ISPyB processing tables.

Attributes use snake_case names mapped onto ISPyB's camelCase columns.
Only the columns served by the GraphQL schema are mapped.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from processed_data.core.database import Base


class DataCollectionFileAttachment(Base):
    """A processed file attached directly to a data collection."""

    id: Mapped[int] = mapped_column("dataCollectionFileAttachmentId", Integer, primary_key=True)
    data_collection_id: Mapped[int] = mapped_column("dataCollectionId", Integer, index=True)
    file_full_path: Mapped[str] = mapped_column("fileFullPath", String(255))
    file_type: Mapped[str | None] = mapped_column("fileType", String(45), nullable=True)
    create_time: Mapped[datetime | None] = mapped_column("createTime", DateTime, nullable=True)


class ProcessingJob(Base):
    """A processing request made against a data collection."""

    id: Mapped[int] = mapped_column("processingJobId", Integer, primary_key=True)
    data_collection_id: Mapped[int | None] = mapped_column(
        "dataCollectionId", Integer, index=True, nullable=True
    )
    display_name: Mapped[str | None] = mapped_column("displayName", String(80), nullable=True)
    comments: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recipe: Mapped[str | None] = mapped_column(String(50), nullable=True)
    automatic: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    record_timestamp: Mapped[datetime | None] = mapped_column(
        "recordTimestamp", DateTime, nullable=True
    )


class ProcessingJobParameter(Base):
    """A key/value parameter of a processing job."""

    id: Mapped[int] = mapped_column("processingJobParameterId", Integer, primary_key=True)
    processing_job_id: Mapped[int | None] = mapped_column(
        "processingJobId",
        ForeignKey("ProcessingJob.processingJobId"),
        index=True,
        nullable=True,
    )
    parameter_key: Mapped[str | None] = mapped_column("parameterKey", String(80), nullable=True)
    parameter_value: Mapped[str | None] = mapped_column(
        "parameterValue", String(1024), nullable=True
    )


class AutoProcProgram(Base):
    """One run of a processing pipeline."""

    id: Mapped[int] = mapped_column("autoProcProgramId", Integer, primary_key=True)
    processing_command_line: Mapped[str | None] = mapped_column(
        "processingCommandLine", String(255), nullable=True
    )
    processing_programs: Mapped[str | None] = mapped_column(
        "processingPrograms", String(255), nullable=True
    )
    processing_status: Mapped[int | None] = mapped_column(
        "processingStatus", Integer, nullable=True
    )
    processing_message: Mapped[str | None] = mapped_column(
        "processingMessage", String(255), nullable=True
    )
    processing_start_time: Mapped[datetime | None] = mapped_column(
        "processingStartTime", DateTime, nullable=True
    )
    processing_end_time: Mapped[datetime | None] = mapped_column(
        "processingEndTime", DateTime, nullable=True
    )
    processing_environment: Mapped[str | None] = mapped_column(
        "processingEnvironment", String(255), nullable=True
    )
    processing_job_id: Mapped[int | None] = mapped_column(
        "processingJobId",
        ForeignKey("ProcessingJob.processingJobId"),
        index=True,
        nullable=True,
    )


class AutoProcProgramAttachment(Base):
    """A file (log, result, graph) written by a processing program."""

    id: Mapped[int] = mapped_column("autoProcProgramAttachmentId", Integer, primary_key=True)
    auto_proc_program_id: Mapped[int] = mapped_column(
        "autoProcProgramId", ForeignKey("AutoProcProgram.autoProcProgramId"), index=True
    )
    file_type: Mapped[str | None] = mapped_column("fileType", String(45), nullable=True)
    file_name: Mapped[str | None] = mapped_column("fileName", String(255), nullable=True)
    file_path: Mapped[str | None] = mapped_column("filePath", String(255), nullable=True)
    importance_rank: Mapped[int | None] = mapped_column("importanceRank", Integer, nullable=True)


class AutoProcIntegration(Base):
    """Integration results of a data collection by one program run."""

    id: Mapped[int] = mapped_column("autoProcIntegrationId", Integer, primary_key=True)
    data_collection_id: Mapped[int] = mapped_column("dataCollectionId", Integer, index=True)
    auto_proc_program_id: Mapped[int | None] = mapped_column(
        "autoProcProgramId",
        ForeignKey("AutoProcProgram.autoProcProgramId"),
        index=True,
        nullable=True,
    )
    start_image_number: Mapped[int | None] = mapped_column(
        "startImageNumber", Integer, nullable=True
    )
    end_image_number: Mapped[int | None] = mapped_column("endImageNumber", Integer, nullable=True)
    refined_detector_distance: Mapped[float | None] = mapped_column(
        "refinedDetectorDistance", Float, nullable=True
    )
    refined_x_beam: Mapped[float | None] = mapped_column("refinedXBeam", Float, nullable=True)
    refined_y_beam: Mapped[float | None] = mapped_column("refinedYBeam", Float, nullable=True)


class AutoProc(Base):
    """Space group and unit cell determined by a program run."""

    id: Mapped[int] = mapped_column("autoProcId", Integer, primary_key=True)
    auto_proc_program_id: Mapped[int | None] = mapped_column(
        "autoProcProgramId",
        ForeignKey("AutoProcProgram.autoProcProgramId"),
        index=True,
        nullable=True,
    )
    space_group: Mapped[str | None] = mapped_column("spaceGroup", String(45), nullable=True)
    refined_cell_a: Mapped[float | None] = mapped_column("refinedCell_a", Float, nullable=True)
    refined_cell_b: Mapped[float | None] = mapped_column("refinedCell_b", Float, nullable=True)
    refined_cell_c: Mapped[float | None] = mapped_column("refinedCell_c", Float, nullable=True)
    refined_cell_alpha: Mapped[float | None] = mapped_column(
        "refinedCell_alpha", Float, nullable=True
    )
    refined_cell_beta: Mapped[float | None] = mapped_column(
        "refinedCell_beta", Float, nullable=True
    )
    refined_cell_gamma: Mapped[float | None] = mapped_column(
        "refinedCell_gamma", Float, nullable=True
    )


class AutoProcScaling(Base):
    """Scaling of an AutoProc result."""

    id: Mapped[int] = mapped_column("autoProcScalingId", Integer, primary_key=True)
    auto_proc_id: Mapped[int | None] = mapped_column(
        "autoProcId", ForeignKey("AutoProc.autoProcId"), index=True, nullable=True
    )
    record_time_stamp: Mapped[datetime | None] = mapped_column(
        "recordTimeStamp", DateTime, nullable=True
    )


class AutoProcScalingStatistics(Base):
    """Merging statistics of one resolution shell of a scaling."""

    id: Mapped[int] = mapped_column("autoProcScalingStatisticsId", Integer, primary_key=True)
    auto_proc_scaling_id: Mapped[int | None] = mapped_column(
        "autoProcScalingId",
        ForeignKey("AutoProcScaling.autoProcScalingId"),
        index=True,
        nullable=True,
    )
    # Stored literal, see StatisticsType
    scaling_statistics_type: Mapped[str] = mapped_column(
        "scalingStatisticsType", String(20), default="overall"
    )
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolution_limit_low: Mapped[float | None] = mapped_column(
        "resolutionLimitLow", Float, nullable=True
    )
    resolution_limit_high: Mapped[float | None] = mapped_column(
        "resolutionLimitHigh", Float, nullable=True
    )
    r_merge: Mapped[float | None] = mapped_column("rMerge", Float, nullable=True)
    r_meas_all_i_plus_i_minus: Mapped[float | None] = mapped_column(
        "rMeasAllIPlusIMinus", Float, nullable=True
    )
    mean_i_over_sig_i: Mapped[float | None] = mapped_column("meanIOverSigI", Float, nullable=True)
    n_total_observations: Mapped[int | None] = mapped_column(
        "nTotalObservations", Integer, nullable=True
    )
    n_total_unique_observations: Mapped[int | None] = mapped_column(
        "nTotalUniqueObservations", Integer, nullable=True
    )
    completeness: Mapped[float | None] = mapped_column(Float, nullable=True)
    multiplicity: Mapped[float | None] = mapped_column(Float, nullable=True)
    anomalous_completeness: Mapped[float | None] = mapped_column(
        "anomalousCompleteness", Float, nullable=True
    )
    anomalous_multiplicity: Mapped[float | None] = mapped_column(
        "anomalousMultiplicity", Float, nullable=True
    )
    cc_half: Mapped[float | None] = mapped_column("ccHalf", Float, nullable=True)
    cc_anomalous: Mapped[float | None] = mapped_column("ccAnomalous", Float, nullable=True)
    res_i_over_sig_i2: Mapped[float | None] = mapped_column("resIOverSigI2", Float, nullable=True)


__all__ = [
    "AutoProc",
    "AutoProcIntegration",
    "AutoProcProgram",
    "AutoProcProgramAttachment",
    "AutoProcScaling",
    "AutoProcScalingStatistics",
    "DataCollectionFileAttachment",
    "ProcessingJob",
    "ProcessingJobParameter",
]
