"""GraphQL server configuration settings.

Controls the GraphQL endpoint, the exploration IDE, query limits and
error masking. Environment variables use GRAPHQL_ prefix.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GraphQLIDE = Literal["graphiql", "apollo-sandbox", "pathfinder", False]


class GraphQLSettings(BaseSettings):
    """GraphQL server configuration.

    Environment variables use GRAPHQL_ prefix.
    Example: GRAPHQL_PATH=/, GRAPHQL_MAX_QUERY_DEPTH=12
    """

    # Endpoint configuration
    path: str = Field(
        default="/",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="GraphQL endpoint path (GET serves the IDE, POST executes)",
    )

    graphql_ide: GraphQLIDE = Field(
        default="graphiql",
        description="GraphQL IDE served on GET: graphiql, apollo-sandbox, pathfinder, or false",
    )

    # Query limits
    max_query_depth: int = Field(
        default=12,
        ge=1,
        le=50,
        description="Maximum query nesting depth",
    )

    dataloader_max_batch_size: int | None = Field(
        default=None,
        ge=1,
        description="Split loader batches larger than this (None keeps one fetch per tick)",
    )

    # Error reporting
    mask_errors: bool | None = Field(
        default=None,
        description="Hide unexpected error messages. None masks in production only.",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def playground_enabled(self) -> bool:
        """Check if the GraphQL IDE is served."""
        return self.graphql_ide is not False

    def should_mask_errors(self, environment: str) -> bool:
        """Resolve the masking toggle against the running environment."""
        if self.mask_errors is None:
            return environment == "production"
        return self.mask_errors
