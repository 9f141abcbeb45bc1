"""Request-scoped batch loader shared by every relationship kind.

``BatchLoader`` wraps Strawberry's ``DataLoader``: ``load()`` calls made
while resolving sibling fields register their keys, the DataLoader
dispatches once the event loop drains the current tick (``call_soon``),
and the fetch function runs once with the deduplicated keys.

Fetch functions return a mapping holding only the keys that matched.
The loader turns the mapping into the ordered result list DataLoader
expects, filling in the absence marker for its shape (``None`` or
``[]``). A failing fetch fails every waiter of that batch with the same
``DataAccessError``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Hashable, Iterable, Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from strawberry.dataloader import DataLoader

from processed_data.core.exceptions import DataAccessError
from processed_data.features.graphql.extensions.metrics import (
    record_dataloader_batch,
    record_dataloader_load,
)

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# async_sessionmaker in production; any factory of async session contexts in tests
Database = Callable[[], "AbstractAsyncContextManager[AsyncSession]"]
FetchFn = Callable[["AsyncSession", Sequence[Any]], Awaitable[Mapping[Any, Any]]]


class LoaderShape(Enum):
    """Result shape of a relationship."""

    SINGLE = "single"
    """At most one value per key; absence is ``None``."""

    MANY = "many"
    """Ordered list per key; absence is ``[]``."""


class BatchLoader(Generic[K, V]):
    """Coalescing, caching loader for one relationship kind.

    Usage:
        jobs = await loaders.processing_jobs.load(data_collection_id)
        statistics = await loaders.scaling_statistics.load((scaling_id, StatisticsType.OVERALL))
    """

    def __init__(
        self,
        name: str,
        fetch: FetchFn,
        database: Database,
        shape: LoaderShape,
        *,
        key: str | None = None,
        max_batch_size: int | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            name: Loader name used in logs and metrics.
            fetch: Coroutine taking a session and the batch keys and
                returning a mapping of the keys that matched.
            database: Session factory for the relational store.
            shape: Whether each key resolves to one value or a list.
            key: Description of the lookup key, for logs.
            max_batch_size: Split larger batches (None fetches each tick once).
        """
        self.name = name
        self.shape = shape
        self.key = key
        self._fetch = fetch
        self._database = database
        self._loader: DataLoader[K, Any] = DataLoader(
            load_fn=self._batch_load,
            max_batch_size=max_batch_size,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, key={self.key!r}, "
            f"shape={self.shape.value})"
        )

    def _absent(self) -> Any:
        return [] if self.shape is LoaderShape.MANY else None

    async def _batch_load(self, keys: list[K]) -> list[Any]:
        """Fetch one tick's keys and order the results like ``keys``."""
        if not keys:
            return []

        record_dataloader_batch(self.name, len(keys))
        logger.debug(
            "Dispatching %s batch",
            self.name,
            extra={"loader": self.name, "loader_key": self.key, "batch_size": len(keys)},
        )

        try:
            async with self._database() as session:
                found = await self._fetch(session, keys)
        except SQLAlchemyError as e:
            logger.exception(
                "Batch fetch failed",
                extra={"loader": self.name, "batch_size": len(keys)},
            )
            raise DataAccessError(loader=self.name, key_count=len(keys)) from e

        return [found[key] if key in found else self._absent() for key in keys]

    async def load(self, key: K) -> Any:
        """Load the value for one key.

        Batched with every other ``load`` issued in the same tick and
        cached for the rest of the request.

        Returns:
            The value (``SINGLE``) or list of values (``MANY``); ``None``
            or ``[]`` when nothing matched.

        Raises:
            DataAccessError: If the batch containing this key failed.
        """
        record_dataloader_load(self.name)
        return await self._loader.load(key)

    async def load_many(self, keys: Iterable[K]) -> list[Any]:
        """Load several keys at once, in the given order."""
        keys = list(keys)
        for _ in keys:
            record_dataloader_load(self.name)
        return await self._loader.load_many(keys)

    def prime(self, key: K, value: Any) -> None:
        """Seed the cache with an already known value."""
        self._loader.prime(key, value)


def group_by(rows: Iterable[V], key: Callable[[V], K]) -> dict[K, list[V]]:
    """Group rows by parent key, keeping the order the store returned."""
    grouped: dict[K, list[V]] = {}
    for row in rows:
        grouped.setdefault(key(row), []).append(row)
    return grouped


def first_by(rows: Iterable[V], key: Callable[[V], K]) -> dict[K, V]:
    """Keep the first row returned for each parent key."""
    first: dict[K, V] = {}
    for row in rows:
        first.setdefault(key(row), row)
    return first


__all__ = [
    "BatchLoader",
    "Database",
    "FetchFn",
    "LoaderShape",
    "first_by",
    "group_by",
]
