"""Tests for JsonFileSnapshotRepository."""

import json
from pathlib import Path

import pytest

from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.persistence import (
    JsonFileSnapshotRepository,
    SnapshotReadError,
    SnapshotWriteError,
)


@pytest.fixture
def repository(tmp_path: Path) -> JsonFileSnapshotRepository:
    """Create a repository in a fresh directory."""
    return JsonFileSnapshotRepository(tmp_path / "data")


class TestJsonFileSnapshotRepository:
    """JsonFileSnapshotRepository tests."""

    def test_path_for(self, repository: JsonFileSnapshotRepository) -> None:
        data_dir = repository.data_dir

        assert repository.path_for(SnapshotKind.PRIVATE_THREAD, 1) == data_dir / "user_1.json"
        assert repository.path_for(SnapshotKind.GROUP_THREAD, 2) == data_dir / "group_2.json"
        assert (
            repository.path_for(SnapshotKind.IDENTITY_MAP, 2)
            == data_dir / "group_2_nicknames.json"
        )

    async def test_load_missing_returns_none(
        self, repository: JsonFileSnapshotRepository
    ) -> None:
        assert await repository.load(SnapshotKind.GROUP_THREAD, 1) is None

    async def test_save_and_load(self, repository: JsonFileSnapshotRepository) -> None:
        data = {"group_id": 1, "nicknames": {"5": "小明"}}

        await repository.save(SnapshotKind.IDENTITY_MAP, 1, data)

        assert await repository.load(SnapshotKind.IDENTITY_MAP, 1) == data

    async def test_writes_pretty_utf8_json(
        self, repository: JsonFileSnapshotRepository
    ) -> None:
        await repository.save(SnapshotKind.GROUP_THREAD, 1, {"text": "小牛"})

        raw = repository.path_for(SnapshotKind.GROUP_THREAD, 1).read_text(encoding="utf-8")
        assert "小牛" in raw
        assert "\n" in raw
        assert not list(repository.data_dir.glob("*.tmp"))

    async def test_save_overwrites(self, repository: JsonFileSnapshotRepository) -> None:
        await repository.save(SnapshotKind.PRIVATE_THREAD, 1, {"v": 1})
        await repository.save(SnapshotKind.PRIVATE_THREAD, 1, {"v": 2})

        assert await repository.load(SnapshotKind.PRIVATE_THREAD, 1) == {"v": 2}

    async def test_invalid_json_raises(self, repository: JsonFileSnapshotRepository) -> None:
        path = repository.path_for(SnapshotKind.GROUP_THREAD, 1)
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotReadError):
            await repository.load(SnapshotKind.GROUP_THREAD, 1)

    async def test_non_object_raises(self, repository: JsonFileSnapshotRepository) -> None:
        path = repository.path_for(SnapshotKind.GROUP_THREAD, 1)
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps([1, 2]), encoding="utf-8")

        with pytest.raises(SnapshotReadError):
            await repository.load(SnapshotKind.GROUP_THREAD, 1)

    async def test_unserializable_raises(
        self, repository: JsonFileSnapshotRepository
    ) -> None:
        with pytest.raises(SnapshotWriteError):
            await repository.save(SnapshotKind.GROUP_THREAD, 1, {"bad": object()})

    async def test_delete(self, repository: JsonFileSnapshotRepository) -> None:
        await repository.save(SnapshotKind.GROUP_THREAD, 1, {"v": 1})

        await repository.delete(SnapshotKind.GROUP_THREAD, 1)
        await repository.delete(SnapshotKind.GROUP_THREAD, 1)

        assert await repository.load(SnapshotKind.GROUP_THREAD, 1) is None
