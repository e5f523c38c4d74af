"""In-memory implementation of SnapshotRepository."""

import copy
from typing import Any

from xiaoniu.domain.repositories import SnapshotKind


class InMemorySnapshotRepository:
    """Keeps snapshots in a dict.

    Used by the ``memory`` backend (nothing survives a restart) and by tests
    that should not touch the filesystem. Snapshots are deep-copied on the
    way in and out so callers cannot alias stored state.
    """

    def __init__(self) -> None:
        self._snapshots: dict[tuple[SnapshotKind, int], dict[str, Any]] = {}
        self.save_count = 0

    async def load(self, kind: SnapshotKind, key: int) -> dict[str, Any] | None:
        data = self._snapshots.get((kind, key))
        return copy.deepcopy(data) if data is not None else None

    async def save(self, kind: SnapshotKind, key: int, data: dict[str, Any]) -> None:
        self._snapshots[(kind, key)] = copy.deepcopy(data)
        self.save_count += 1

    async def delete(self, kind: SnapshotKind, key: int) -> None:
        self._snapshots.pop((kind, key), None)

    def keys(self, kind: SnapshotKind) -> list[int]:
        """List stored keys of one kind."""
        return sorted(key for k, key in self._snapshots if k is kind)
