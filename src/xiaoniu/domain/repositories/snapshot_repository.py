"""Snapshot repository protocol."""

from enum import Enum
from typing import Any, Protocol


class SnapshotKind(Enum):
    """快照类型（每种实体一个）"""

    PRIVATE_THREAD = "private_thread"
    GROUP_THREAD = "group_thread"
    IDENTITY_MAP = "identity_map"


class SnapshotRepository(Protocol):
    """实体快照仓库的抽象接口

    每个 (kind, key) 对应一份完整的 JSON 快照，保存时整体覆盖，
    不做追加。持久化层的实现细节（文件、SQLite、内存）对调用方隐藏。
    """

    async def load(self, kind: SnapshotKind, key: int) -> dict[str, Any] | None:
        """读取快照

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID

        Returns:
            快照内容（不存在时返回 None，这是正常情况）

        Raises:
            SnapshotReadError: 快照存在但无法读取或解析
        """
        ...

    async def save(self, kind: SnapshotKind, key: int, data: dict[str, Any]) -> None:
        """保存快照（整体覆盖）

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID
            data: 快照内容

        Raises:
            SnapshotWriteError: 写入失败
        """
        ...

    async def delete(self, kind: SnapshotKind, key: int) -> None:
        """删除快照（不存在时什么也不做）

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID
        """
        ...
