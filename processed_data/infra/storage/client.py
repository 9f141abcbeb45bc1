"""S3-compatible storage client used to sign download URLs.

The service never reads or writes objects; it only hands clients
time-limited ``get_object`` URLs for files that processing pipelines
wrote to the bucket.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from processed_data.infra.metrics.prometheus import storage_presigned_urls_total
from processed_data.infra.storage.exceptions import (
    StorageError,
    StorageNotConfiguredError,
    StoragePermissionError,
    map_boto_error,
)

if TYPE_CHECKING:
    from types import TracebackType

    from processed_data.core.settings.storage import StorageSettings

logger = logging.getLogger(__name__)


class StorageClient:
    """Async S3-compatible client that generates presigned download URLs.

    One instance is created at startup and shared by all requests. URL
    generation is a local signing operation; no request reaches the object
    store.

    Example:
        >>> from processed_data.core.settings import get_storage_settings
        >>> client = StorageClient(get_storage_settings())
        >>> await client.startup()
        >>> url = await client.get_presigned_url("data/run1/img.h5")
    """

    def __init__(self, settings: StorageSettings) -> None:
        """Initialize storage client with settings.

        Args:
            settings: Storage settings containing S3 configuration.

        Raises:
            StorageNotConfiguredError: If no bucket is configured.
        """
        if not settings.is_configured:
            msg = "Storage is not configured. Set S3_BUCKET and, if needed, S3 credentials."
            raise StorageNotConfiguredError(msg)

        self.settings = settings
        self._session = aioboto3.Session()
        self._client: Any = None
        self._client_context: Any = None

    async def __aenter__(self) -> StorageClient:
        await self.ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def bucket(self) -> str:
        """Bucket URLs are signed for."""
        return self.settings.bucket  # type: ignore[return-value]

    @property
    def is_ready(self) -> bool:
        """Check if the client is initialized and ready for operations."""
        return self._client is not None

    async def startup(self) -> None:
        """Create the S3 client during application startup."""
        if self._client is not None:
            logger.debug("Storage client already initialized")
            return
        await self.ensure_client()

    async def shutdown(self) -> None:
        """Close the S3 client during application shutdown."""
        if self._client is None:
            logger.debug("Storage client not initialized, nothing to shutdown")
            return

        logger.info("Shutting down storage client")
        await self.close()

    async def ensure_client(self) -> Any:
        """Ensure the S3 client is initialized and return it."""
        if self._client is None:
            boto_config = Config(
                retries={
                    "max_attempts": self.settings.max_retries,
                    "mode": self.settings.retry_mode,
                },
                connect_timeout=self.settings.timeout,
                read_timeout=self.settings.timeout,
                max_pool_connections=self.settings.max_pool_connections,
                s3={"addressing_style": "path" if self.settings.force_path_style else "auto"},
            )

            self._client_context = self._session.client(
                "s3",
                **self.settings.get_boto3_config(),
                config=boto_config,
            )
            self._client = await self._client_context.__aenter__()

            logger.info(
                "Storage client initialized",
                extra={
                    "endpoint": self.settings.endpoint_url,
                    "bucket": self.settings.bucket,
                    "region": self.settings.region,
                    "force_path_style": self.settings.force_path_style,
                },
            )

        return self._client

    async def close(self) -> None:
        """Close the S3 client and clean up resources."""
        if self._client_context is not None:
            try:
                await self._client_context.__aexit__(None, None, None)
            finally:
                self._client = None
                self._client_context = None

    async def get_presigned_url(
        self,
        key: str,
        expires_in: int | None = None,
    ) -> str:
        """Generate a presigned URL for downloading an object.

        Args:
            key: Object key.
            expires_in: URL validity in seconds (defaults to the configured
                window, ten minutes unless overridden).

        Returns:
            Presigned ``get_object`` URL.

        Raises:
            StorageError: If URL generation fails.
        """
        expires_in = expires_in or self.settings.presigned_url_expiry_seconds

        try:
            s3 = await self.ensure_client()
            url: str = await s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except ClientError as e:
            storage_presigned_urls_total.labels(status="error").inc()
            logger.exception("Failed to generate presigned URL", extra={"key": key})
            raise map_boto_error(e, operation="presigned_url", key=key) from e
        except BotoCoreError as e:
            storage_presigned_urls_total.labels(status="error").inc()
            logger.exception("Failed to sign download URL", extra={"key": key})
            raise StoragePermissionError(
                f"Failed to sign download URL for {key}: {e}",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        storage_presigned_urls_total.labels(status="success").inc()
        logger.debug(
            "Generated presigned download URL for %s (expires in %ss)",
            key,
            expires_in,
        )
        return url


__all__ = ["StorageClient"]
