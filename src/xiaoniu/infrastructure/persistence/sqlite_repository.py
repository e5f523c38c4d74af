"""SQLite implementation of SnapshotRepository."""

import json
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.persistence.exceptions import (
    SnapshotReadError,
    SnapshotWriteError,
)
from xiaoniu.infrastructure.persistence.models import SnapshotModel


class SQLiteSnapshotRepository:
    """SQLite 版 SnapshotRepository 实现

    每个 (kind, key) 对应 snapshots 表中的一行，payload 列保存 JSON。
    使用异步会话进行非阻塞操作。
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
    ) -> None:
        """初始化

        Args:
            session_factory: 异步会话工厂
        """
        self._session_factory = session_factory

    async def load(self, kind: SnapshotKind, key: int) -> dict[str, Any] | None:
        """读取快照

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID

        Returns:
            快照内容（不存在时返回 None）
        """
        try:
            async with self._session_factory() as session:
                result = await session.exec(
                    select(SnapshotModel).where(
                        SnapshotModel.kind == kind.value, SnapshotModel.key == key
                    )
                )
                model = result.first()
        except SQLAlchemyError as e:
            raise SnapshotReadError(f"Cannot load {kind.value}:{key}: {e}") from e

        if model is None:
            return None
        try:
            data = json.loads(model.payload)
        except json.JSONDecodeError as e:
            raise SnapshotReadError(f"Invalid JSON for {kind.value}:{key}: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotReadError(f"Snapshot {kind.value}:{key} is not an object")
        return data

    async def save(self, kind: SnapshotKind, key: int, data: dict[str, Any]) -> None:
        """保存快照（upsert）

        已存在同一 (kind, key) 的行时整体覆盖。

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID
            data: 快照内容
        """
        payload = json.dumps(data, ensure_ascii=False)
        try:
            async with self._session_factory() as session:
                result = await session.exec(
                    select(SnapshotModel).where(
                        SnapshotModel.kind == kind.value, SnapshotModel.key == key
                    )
                )
                existing = result.first()

                if existing:
                    # 更新
                    existing.payload = payload
                    existing.updated_at = datetime.now(timezone.utc)
                    session.add(existing)
                else:
                    # 新建
                    session.add(
                        SnapshotModel(kind=kind.value, key=key, payload=payload)
                    )

                await session.commit()
        except SQLAlchemyError as e:
            raise SnapshotWriteError(f"Cannot save {kind.value}:{key}: {e}") from e

    async def delete(self, kind: SnapshotKind, key: int) -> None:
        """删除快照

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID
        """
        async with self._session_factory() as session:
            result = await session.exec(
                select(SnapshotModel).where(
                    SnapshotModel.kind == kind.value, SnapshotModel.key == key
                )
            )
            model = result.first()
            if model is not None:
                await session.delete(model)
                await session.commit()
