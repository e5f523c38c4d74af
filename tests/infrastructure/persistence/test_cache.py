"""Tests for EntityCache."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

from xiaoniu.domain.entities import IdentityMap
from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.persistence import (
    EntityCache,
    InMemorySnapshotRepository,
    SnapshotReadError,
)
from xiaoniu.infrastructure.persistence.snapshots import identity_map_from_snapshot


def make_cache(repository: Any) -> EntityCache[IdentityMap]:
    return EntityCache(
        SnapshotKind.IDENTITY_MAP,
        repository,
        decode=identity_map_from_snapshot,
        factory=lambda key: IdentityMap(group_id=key),
    )


class TestEntityCache:
    """EntityCache tests."""

    async def test_creates_fresh_entity(self) -> None:
        cache = make_cache(InMemorySnapshotRepository())

        entity = await cache.get_or_create(1)

        assert entity == IdentityMap(group_id=1)
        assert 1 in cache
        assert len(cache) == 1

    async def test_returns_same_object(self) -> None:
        cache = make_cache(InMemorySnapshotRepository())

        assert await cache.get_or_create(1) is await cache.get_or_create(1)

    async def test_hydrates_from_repository(self) -> None:
        repository = InMemorySnapshotRepository()
        await repository.save(
            SnapshotKind.IDENTITY_MAP, 1, {"group_id": 1, "nicknames": {"5": "alice"}}
        )
        cache = make_cache(repository)

        entity = await cache.get_or_create(1)

        assert entity.nicknames == {5: "alice"}

    async def test_concurrent_first_access_loads_once(self) -> None:
        repository = AsyncMock()

        async def slow_load(kind: SnapshotKind, key: int) -> None:
            await asyncio.sleep(0.01)
            return None

        repository.load.side_effect = slow_load
        cache = make_cache(repository)

        first, second = await asyncio.gather(cache.get_or_create(1), cache.get_or_create(1))

        assert first is second
        assert repository.load.await_count == 1

    async def test_read_error_yields_fresh_entity(self) -> None:
        repository = AsyncMock()
        repository.load.side_effect = SnapshotReadError("corrupt")
        cache = make_cache(repository)

        entity = await cache.get_or_create(1)

        assert entity == IdentityMap(group_id=1)

    async def test_decode_error_yields_fresh_entity(self) -> None:
        repository = InMemorySnapshotRepository()
        await repository.save(SnapshotKind.IDENTITY_MAP, 1, {"nicknames": "oops"})

        def broken_decode(data: dict[str, Any], key: int) -> IdentityMap:
            raise ValueError("bad snapshot")

        cache: EntityCache[IdentityMap] = EntityCache(
            SnapshotKind.IDENTITY_MAP,
            repository,
            decode=broken_decode,
            factory=lambda key: IdentityMap(group_id=key),
        )

        assert await cache.get_or_create(1) == IdentityMap(group_id=1)

    async def test_peek_does_not_load(self) -> None:
        repository = AsyncMock()
        cache = make_cache(repository)

        assert cache.peek(1) is None
        repository.load.assert_not_awaited()


class TestInMemorySnapshotRepository:
    """InMemorySnapshotRepository tests."""

    async def test_copies_on_save_and_load(self) -> None:
        repository = InMemorySnapshotRepository()
        data = {"messages": [1]}

        await repository.save(SnapshotKind.GROUP_THREAD, 1, data)
        data["messages"].append(2)
        loaded = await repository.load(SnapshotKind.GROUP_THREAD, 1)

        assert loaded == {"messages": [1]}
        assert repository.save_count == 1

    async def test_delete_and_keys(self) -> None:
        repository = InMemorySnapshotRepository()
        await repository.save(SnapshotKind.GROUP_THREAD, 2, {})
        await repository.save(SnapshotKind.GROUP_THREAD, 1, {})
        await repository.save(SnapshotKind.IDENTITY_MAP, 3, {})

        await repository.delete(SnapshotKind.GROUP_THREAD, 2)

        assert repository.keys(SnapshotKind.GROUP_THREAD) == [1]
