"""Process-wide keyed entity cache with lazy hydration."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from xiaoniu.domain.repositories import SnapshotKind, SnapshotRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityCache(Generic[T]):
    """Key -> entity map hydrated from a snapshot repository.

    ``get_or_create`` returns the cached entity, else the one decoded from
    the stored snapshot, else a fresh one. Every caller asking for the same
    key gets the same object for the life of the process. A snapshot that
    cannot be read is logged and replaced by a fresh entity, the in-memory
    state being the source of truth from then on.
    """

    def __init__(
        self,
        kind: SnapshotKind,
        repository: SnapshotRepository,
        decode: Callable[[dict[str, Any], int], T],
        factory: Callable[[int], T],
    ) -> None:
        """Initialize the cache.

        Args:
            kind: Snapshot kind the entities are stored under.
            repository: Backend to hydrate from.
            decode: Builds an entity from (snapshot, key).
            factory: Builds an empty entity for a key.
        """
        self._kind = kind
        self._repository = repository
        self._decode = decode
        self._factory = factory
        self._entries: dict[int, T] = {}
        self._loading: dict[int, asyncio.Lock] = {}

    def __contains__(self, key: int) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, key: int) -> T | None:
        """Return the cached entity without touching the repository."""
        return self._entries.get(key)

    async def get_or_create(self, key: int) -> T:
        """Get an entity, loading or creating it on first access.

        Concurrent first accesses to one key share a single load.

        Args:
            key: Entity key.

        Returns:
            The entity owned by this cache slot.
        """
        entity = self._entries.get(key)
        if entity is not None:
            return entity

        lock = self._loading.setdefault(key, asyncio.Lock())
        async with lock:
            entity = self._entries.get(key)
            if entity is not None:
                return entity

            entity = await self._load(key)
            self._entries[key] = entity
        self._loading.pop(key, None)
        return entity

    async def _load(self, key: int) -> T:
        try:
            data = await self._repository.load(self._kind, key)
        except Exception:
            logger.exception("Failed to load %s snapshot: key=%s", self._kind.value, key)
            data = None

        if data is not None:
            try:
                entity = self._decode(data, key)
                logger.debug("Loaded %s: key=%s", self._kind.value, key)
                return entity
            except Exception:
                logger.exception(
                    "Failed to decode %s snapshot: key=%s", self._kind.value, key
                )

        logger.debug("Created new %s: key=%s", self._kind.value, key)
        return self._factory(key)
