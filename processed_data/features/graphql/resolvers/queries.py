"""Query resolvers for the GraphQL API.

Provides:
- dataCollection(id): Datasets entity for direct (non-gateway) queries
"""

from __future__ import annotations

import logging
from typing import Annotated

import strawberry

from processed_data.features.graphql.resolvers.federation import resolve_entity_reference
from processed_data.features.graphql.types import DataCollection

logger = logging.getLogger(__name__)

DataCollectionIdArg = Annotated[
    int, strawberry.argument(description="Data collection ID"),
]


@strawberry.type(description="Root query type")
class Query:
    """GraphQL Query resolvers."""

    @strawberry.field(description="Processing results of a single data collection")
    def data_collection(self, id: DataCollectionIdArg) -> DataCollection:
        """Return the data collection entity for an ID.

        Existence is owned by the datasets subgraph, so this never checks
        the database; unknown IDs simply have no processing results.
        """
        return resolve_entity_reference("Datasets", {"id": id})


__all__ = ["Query"]
