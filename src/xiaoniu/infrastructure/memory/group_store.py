"""Group chat context store."""

import logging
from datetime import datetime, timezone

from xiaoniu.domain.entities import GroupLine, GroupThread
from xiaoniu.domain.entities.group_thread import (
    MAX_GROUP_CONTEXT_MESSAGES,
    MAX_MESSAGE_LENGTH,
)
from xiaoniu.domain.repositories import SnapshotKind, SnapshotRepository
from xiaoniu.domain.services import format_group_context
from xiaoniu.infrastructure.memory.identity_store import IdentityStore
from xiaoniu.infrastructure.persistence.cache import EntityCache
from xiaoniu.infrastructure.persistence.snapshots import (
    group_thread_from_snapshot,
    group_thread_to_snapshot,
)
from xiaoniu.infrastructure.persistence.writer import SnapshotWriter

logger = logging.getLogger(__name__)


class GroupMemoryStore:
    """Per-group bounded history of everything said in the group.

    Every visible message is kept, the bot's own replies included, so the
    model can follow the conversation it is answering. Overlong messages
    are not stored.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        repository: SnapshotRepository,
        writer: SnapshotWriter,
        max_messages: int = MAX_GROUP_CONTEXT_MESSAGES,
        max_message_length: int = MAX_MESSAGE_LENGTH,
    ) -> None:
        """Initialize the store.

        Args:
            identity_store: Used to render speakers in exported context.
            repository: Backend holding group thread snapshots.
            writer: Persistence worker for group thread snapshots.
            max_messages: Number of lines kept per group.
            max_message_length: Longest storable message, in characters.
        """
        self._identity_store = identity_store
        self._writer = writer
        self._max_messages = max_messages
        self._max_message_length = max_message_length
        self._cache: EntityCache[GroupThread] = EntityCache(
            SnapshotKind.GROUP_THREAD,
            repository,
            decode=group_thread_from_snapshot,
            factory=lambda group_id: GroupThread(group_id=group_id),
        )

    async def get_or_create(self, group_id: int) -> GroupThread:
        """Get a group's thread, loading it from storage on first access."""
        return await self._cache.get_or_create(group_id)

    async def append(self, group_id: int, sender_id: int, text: str) -> bool:
        """Append a line and schedule a snapshot of the thread.

        Args:
            group_id: Group the line was said in.
            sender_id: Speaker.
            text: Message content.

        Returns:
            False when the line was rejected (no group, empty or too long).
        """
        if group_id == 0 or not text:
            return False

        # len() counts code points, not bytes
        if len(text) > self._max_message_length:
            logger.debug(
                "Group %s: message too long (%d chars), not stored",
                group_id,
                len(text),
            )
            return False

        thread = await self._cache.get_or_create(group_id)
        async with thread.lock:
            thread.append(
                GroupLine(
                    sender_id=sender_id,
                    text=text,
                    timestamp=datetime.now(timezone.utc),
                ),
                self._max_messages,
            )
            await self._writer.schedule(group_id, group_thread_to_snapshot(thread))
            logger.debug("Group %s: %d lines", group_id, len(thread.lines))
        return True

    async def export_for_prompt(self, group_id: int) -> tuple[str, GroupLine | None]:
        """Split the thread into rendered history and the latest line.

        Returns:
            ``("", None)`` for an empty thread, ``("", line)`` for a single
            line, else the rendered earlier lines and the latest line.
        """
        thread = await self._cache.get_or_create(group_id)
        earlier, last = thread.split_last()
        if last is None or not earlier:
            return "", last

        rendered = [
            await self._identity_store.format_line(group_id, line.sender_id, line.text)
            for line in earlier
        ]
        return format_group_context(rendered), last
