"""S3-compatible object storage configuration settings.

Environment variables use S3_ prefix.
Example: S3_BUCKET="processed-data"
         S3_ENDPOINT_URL="http://localhost:9000"

Supports:
- AWS S3 (default, no endpoint needed)
- MinIO / Ceph RGW (set endpoint_url and usually force_path_style)
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_yaml_source


class StorageSettings(BaseSettings):
    """Object store settings used to sign download URLs.

    Environment variables use S3_ prefix.
    Example: S3_ACCESS_KEY_ID=..., S3_SECRET_ACCESS_KEY=..., S3_FORCE_PATH_STYLE=true
    """

    # ──────────────────────────────────────────────────────────────
    # S3 Connection Configuration
    # ──────────────────────────────────────────────────────────────

    bucket: str | None = Field(
        default=None,
        min_length=3,
        max_length=63,
        description="Bucket holding processed data files",
    )

    endpoint_url: str | None = Field(
        default=None,
        description="S3-compatible endpoint URL. None for AWS S3.",
    )

    region: str = Field(
        default="us-east-1",
        description="Region used for request signing",
    )

    access_key_id: SecretStr | None = Field(
        default=None,
        description="S3 access key ID",
    )

    secret_access_key: SecretStr | None = Field(
        default=None,
        description="S3 secret access key",
    )

    force_path_style: bool = Field(
        default=False,
        description="Address buckets by path instead of virtual host",
    )

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum number of retry attempts for failed S3 operations",
    )

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="S3 operation timeout in seconds",
    )

    max_pool_connections: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Maximum number of connections in the connection pool",
    )

    retry_mode: str = Field(
        default="standard",
        description="boto3 retry mode: standard, adaptive, or legacy",
    )

    presigned_url_expiry_seconds: int = Field(
        default=600,
        ge=1,
        le=604800,
        description="Validity window of signed download URLs",
    )

    @field_validator("retry_mode")
    @classmethod
    def _validate_retry_mode(cls, value: str) -> str:
        """Validate retry_mode is one of the allowed values."""
        allowed_modes = {"standard", "adaptive", "legacy"}
        if value not in allowed_modes:
            raise ValueError(f"retry_mode must be one of {allowed_modes}, got {value}")
        return value

    @model_validator(mode="after")
    def _validate_credential_consistency(self) -> StorageSettings:
        """Validate that both credentials are provided together or neither."""
        if (self.access_key_id is None) != (self.secret_access_key is None):
            raise ValueError(
                "Both access_key_id and secret_access_key must be provided together. "
                "Provide both or neither (for ambient credentials)."
            )
        return self

    # ──────────────────────────────────────────────────────────────
    # Computed Properties
    # ──────────────────────────────────────────────────────────────

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_configured(self) -> bool:
        """Check if a bucket has been configured."""
        return self.bucket is not None

    # ──────────────────────────────────────────────────────────────
    # Helper Methods
    # ──────────────────────────────────────────────────────────────

    def get_boto3_config(self) -> dict[str, Any]:
        """Get configuration dict for the aioboto3 S3 client.

        Returns:
            Dictionary with region, endpoint and static credentials when set.
            Without credentials botocore falls back to its default chain.
        """
        if not self.is_configured:
            raise ValueError("Storage not configured")

        config: dict[str, Any] = {"region_name": self.region}

        if self.access_key_id is not None and self.secret_access_key is not None:
            config["aws_access_key_id"] = self.access_key_id.get_secret_value()
            config["aws_secret_access_key"] = self.secret_access_key.get_secret_value()

        if self.endpoint_url:
            config["endpoint_url"] = self.endpoint_url

        return config

    model_config = SettingsConfigDict(
        env_prefix="S3_",
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
            create_yaml_source(settings_cls, "storage"),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
