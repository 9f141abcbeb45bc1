"""Federation entity reference resolution.

The gateway sends ``_entities(representations: [...])`` with one
representation per entity it needs extended, e.g.
``{"__typename": "Datasets", "id": 42}``. Resolution builds a stub from
the key alone; relationship fields load through the request's loaders
only when the gateway selects them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from processed_data.core.exceptions import ReferenceResolutionError
from processed_data.features.graphql.types.data_collection import DataCollection

logger = logging.getLogger(__name__)


def _parse_int_key(type_name: str, representation: Mapping[str, Any], field: str) -> int:
    """Read a non-negative integer key field, accepting its decimal string form."""
    if field not in representation:
        raise ReferenceResolutionError(type_name, f"missing key field '{field}'")

    value = representation[field]
    if isinstance(value, bool):
        raise ReferenceResolutionError(type_name, f"'{field}' must be a non-negative integer, got {value!r}")
    if isinstance(value, int) and value >= 0:
        return value
    # ASCII digits only: int() would also take signs, spaces, underscores and other scripts
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise ReferenceResolutionError(type_name, f"'{field}' must be a non-negative integer, got {value!r}")


def _data_collection_stub(representation: Mapping[str, Any]) -> DataCollection:
    return DataCollection(id=_parse_int_key("Datasets", representation, "id"))


# Entity types this subgraph can resolve by reference
ENTITY_RESOLVERS: dict[str, Callable[[Mapping[str, Any]], Any]] = {
    "Datasets": _data_collection_stub,
}


def resolve_entity_reference(type_name: str, representation: Mapping[str, Any]) -> Any:
    """Build a local entity stub from a federation representation.

    No I/O happens here. The stub carries the key only.

    Args:
        type_name: Value of ``__typename`` in the representation.
        representation: Key fields supplied by the gateway.

    Returns:
        Entity stub of the named type.

    Raises:
        ReferenceResolutionError: If the type is not resolvable here or the
            key fields are missing or malformed.
    """
    resolver = ENTITY_RESOLVERS.get(type_name)
    if resolver is None:
        raise ReferenceResolutionError(type_name, "type is not resolvable by this subgraph")

    try:
        return resolver(representation)
    except ReferenceResolutionError:
        logger.warning(
            "Rejected entity representation",
            extra={"typename": type_name, "representation": dict(representation)},
        )
        raise


__all__ = ["ENTITY_RESOLVERS", "resolve_entity_reference"]
