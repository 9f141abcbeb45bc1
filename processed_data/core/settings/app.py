"""Application settings for the HTTP listener and service identity."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_yaml_source

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """Service settings.

    Environment variables use APP_ prefix. The listening port also honours
    the bare PORT variable used by container platforms.
    Example: APP_ENVIRONMENT=production, PORT=8080
    """

    service_name: str = Field(
        default="processed-data",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging/tracing (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="Processed Data Subgraph",
        min_length=1,
        max_length=200,
        description="Title reported by the FastAPI application",
    )
    version: str = Field(
        default="0.1.0",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$",
        description="Service version (semver format)",
    )
    environment: Environment = Field(
        default="development", description="Environment: development|staging|production|test",
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    host: str = Field(
        default="0.0.0.0", min_length=1, max_length=255, description="Server bind host",
    )
    port: int = Field(
        default=80,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("APP_PORT", "PORT"),
        description="Port to serve the GraphQL endpoint on",
    )

    @model_validator(mode="after")
    def validate_production_settings(self) -> AppSettings:
        """Validate settings for production environment."""
        if self.environment == "production" and self.debug:
            msg = "Debug mode cannot be enabled in production environment"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="APP_",
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
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_yaml_source(settings_cls, "app"),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"
