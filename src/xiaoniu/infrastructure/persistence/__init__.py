"""Persistence infrastructure."""

from xiaoniu.infrastructure.persistence.cache import EntityCache
from xiaoniu.infrastructure.persistence.database import DatabaseManager
from xiaoniu.infrastructure.persistence.exceptions import (
    DatabaseError,
    PersistenceError,
    SnapshotReadError,
    SnapshotWriteError,
)
from xiaoniu.infrastructure.persistence.file_repository import (
    JsonFileSnapshotRepository,
)
from xiaoniu.infrastructure.persistence.memory_repository import (
    InMemorySnapshotRepository,
)
from xiaoniu.infrastructure.persistence.models import SnapshotModel
from xiaoniu.infrastructure.persistence.sqlite_repository import (
    SQLiteSnapshotRepository,
)
from xiaoniu.infrastructure.persistence.writer import SnapshotWriter

__all__ = [
    "DatabaseError",
    "DatabaseManager",
    "EntityCache",
    "InMemorySnapshotRepository",
    "JsonFileSnapshotRepository",
    "PersistenceError",
    "SQLiteSnapshotRepository",
    "SnapshotModel",
    "SnapshotReadError",
    "SnapshotWriteError",
    "SnapshotWriter",
]
