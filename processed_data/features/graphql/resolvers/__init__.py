"""GraphQL root resolvers and federation entity resolution."""

from __future__ import annotations

from processed_data.features.graphql.resolvers.federation import (
    ENTITY_RESOLVERS,
    resolve_entity_reference,
)
from processed_data.features.graphql.resolvers.queries import Query

__all__ = ["ENTITY_RESOLVERS", "Query", "resolve_entity_reference"]
