"""SQLite engine and session management for the snapshot table."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Registers SnapshotModel with the metadata used by create_tables
from xiaoniu.infrastructure.persistence import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


def sqlite_url(database_path: str) -> str:
    """把数据库路径转换为 aiosqlite 连接 URL"""
    return f"sqlite+aiosqlite:///{database_path}"


def _enable_wal(dbapi_connection: Any, connection_record: Any) -> None:
    # Three snapshot writers share one file
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class DatabaseManager:
    """快照数据库管理

    持有 sqlite 后端的异步引擎，提供会话、建表、健康检查与关闭。
    文件数据库以 WAL 模式打开，三个快照写入器可以并发写入。
    """

    def __init__(self, database_path: str) -> None:
        """初始化（不会立即连接）

        Args:
            database_path: 数据库文件路径，":memory:" 表示内存数据库
        """
        self._database_path = database_path
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def get_engine(self) -> AsyncEngine:
        """返回引擎，首次调用时创建

        文件数据库的上级目录不存在时会被创建。
        """
        if self._engine is None:
            self._engine = self._create_engine()
            self._session_factory = async_sessionmaker(
                self._engine, class_=AsyncSession, expire_on_commit=False
            )
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        if self._database_path == IN_MEMORY:
            return create_async_engine(sqlite_url(IN_MEMORY))

        Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(sqlite_url(self._database_path))
        event.listen(engine.sync_engine, "connect", _enable_wal)
        logger.debug("Opened snapshot database: %s", self._database_path)
        return engine

    async def create_tables(self) -> None:
        """创建快照表（已存在时不做处理）"""
        async with self.get_engine().begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """打开一个会话，退出时关闭"""
        self.get_engine()
        assert self._session_factory is not None
        async with self._session_factory() as session:
            yield session

    async def is_healthy(self) -> bool:
        """执行 SELECT 1 确认数据库可用"""
        try:
            async with self.get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Database health check failed")
            return False
        return True

    async def close(self) -> None:
        """释放连接池，之后再次使用时会重新创建引擎"""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
