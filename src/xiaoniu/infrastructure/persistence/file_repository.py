"""JSON file implementation of SnapshotRepository."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.persistence.exceptions import (
    SnapshotReadError,
    SnapshotWriteError,
)

logger = logging.getLogger(__name__)

_FILENAME_PATTERNS = {
    SnapshotKind.PRIVATE_THREAD: "user_{key}.json",
    SnapshotKind.GROUP_THREAD: "group_{key}.json",
    SnapshotKind.IDENTITY_MAP: "group_{key}_nicknames.json",
}


class JsonFileSnapshotRepository:
    """JSON 文件版 SnapshotRepository 实现

    每个快照保存为数据目录下的一个文件，每次保存都整体重写。
    写入先落到临时文件再原子替换，读者不会看到写了一半的文件。
    文件 I/O 在线程中执行，不阻塞事件循环。
    """

    def __init__(self, data_dir: str | Path) -> None:
        """初始化

        Args:
            data_dir: 数据目录（不存在时在首次保存时创建）
        """
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, kind: SnapshotKind, key: int) -> Path:
        """返回快照文件路径

        Args:
            kind: 快照类型
            key: 用户 ID 或群 ID

        Returns:
            文件路径
        """
        return self._data_dir / _FILENAME_PATTERNS[kind].format(key=key)

    async def load(self, kind: SnapshotKind, key: int) -> dict[str, Any] | None:
        """读取快照（文件不存在时返回 None）"""
        return await asyncio.to_thread(self._read, self.path_for(kind, key))

    async def save(self, kind: SnapshotKind, key: int, data: dict[str, Any]) -> None:
        """保存快照（整体覆盖）"""
        await asyncio.to_thread(self._write, self.path_for(kind, key), data)

    async def delete(self, kind: SnapshotKind, key: int) -> None:
        """删除快照文件"""
        path = self.path_for(kind, key)
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.debug("Deleted snapshot file: %s", path)

    def _read(self, path: Path) -> dict[str, Any] | None:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            # 文件不存在是正常情况
            return None
        except OSError as e:
            raise SnapshotReadError(f"Cannot read {path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SnapshotReadError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise SnapshotReadError(f"Snapshot in {path} is not a JSON object")
        return data

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise SnapshotWriteError(f"Cannot write {path}: {e}") from e
