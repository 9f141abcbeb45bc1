"""OpenTelemetry tracing configuration."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_yaml_source


class OtelSettings(BaseSettings):
    """OpenTelemetry distributed tracing settings.

    Environment variables use OTEL_ prefix. Tracing is switched on by
    pointing OTEL_COLLECTOR_URL at an OTLP gRPC collector.
    Example: OTEL_COLLECTOR_URL=http://tempo:4317
    """

    collector_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OTEL_COLLECTOR_URL", "OTEL_ENDPOINT"),
        description="OTLP gRPC endpoint (e.g., http://tempo:4317)",
    )

    service_name: str = Field(
        default="processed-data",
        min_length=1,
        max_length=100,
        description="Service name for tracing",
    )

    service_version: str = Field(
        default="0.1.0",
        min_length=1,
        max_length=50,
        description="Service version for tracing",
    )

    insecure: bool = Field(
        default=True,
        description="Use an insecure gRPC channel to the collector",
    )

    export_timeout: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Exporter timeout in seconds",
    )

    sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Fraction of root traces sampled",
    )

    instrument_fastapi: bool = Field(default=True, description="Instrument FastAPI requests")
    instrument_sqlalchemy: bool = Field(default=True, description="Instrument SQLAlchemy queries")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_configured(self) -> bool:
        """Check if a collector endpoint is configured."""
        return bool(self.collector_url)

    def exporter_kwargs(self) -> dict[str, Any]:
        """Return kwargs for OTLPSpanExporter initialization."""
        return {
            "endpoint": self.collector_url,
            "insecure": self.insecure,
            "timeout": self.export_timeout,
        }

    def resource_attributes(self) -> dict[str, str]:
        """Build resource attributes dict for service identification."""
        from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION

        return {
            SERVICE_NAME: self.service_name,
            SERVICE_VERSION: self.service_version,
        }

    def get_sampler(self) -> Any:
        """Get a parent-based sampler honouring sample_rate for root spans."""
        from opentelemetry.sdk.trace.sampling import ALWAYS_ON, ParentBased, TraceIdRatioBased

        root = ALWAYS_ON if self.sample_rate >= 1.0 else TraceIdRatioBased(self.sample_rate)
        return ParentBased(root=root)

    model_config = SettingsConfigDict(
        env_prefix="OTEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_yaml_source(settings_cls, "otel"),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
