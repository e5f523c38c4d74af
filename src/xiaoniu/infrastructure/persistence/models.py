"""SQLModel table definitions."""

from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class SnapshotModel(SQLModel, table=True):
    """实体快照表"""

    __tablename__ = "snapshots"

    id: int | None = Field(default=None, primary_key=True)
    kind: str = Field(index=True)
    key: int = Field(index=True)
    payload: str  # JSON format
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    __table_args__ = (UniqueConstraint("kind", "key", name="uq_snapshot_kind_key"),)
