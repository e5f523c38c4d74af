"""Domain repositories."""

from xiaoniu.domain.repositories.snapshot_repository import (
    SnapshotKind,
    SnapshotRepository,
)

__all__ = [
    "SnapshotKind",
    "SnapshotRepository",
]
