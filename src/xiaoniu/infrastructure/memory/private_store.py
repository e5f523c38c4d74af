"""Private conversation history store."""

import logging
from datetime import datetime, timezone

from xiaoniu.domain.entities import PrivateThread, StoredTurn, TurnRole
from xiaoniu.domain.entities.private_thread import MAX_HISTORY_MESSAGES
from xiaoniu.domain.repositories import SnapshotKind, SnapshotRepository
from xiaoniu.infrastructure.persistence.cache import EntityCache
from xiaoniu.infrastructure.persistence.snapshots import (
    private_thread_from_snapshot,
    private_thread_to_snapshot,
)
from xiaoniu.infrastructure.persistence.writer import SnapshotWriter

logger = logging.getLogger(__name__)


class PrivateMemoryStore:
    """Per-user bounded history of private conversations.

    Only assistant appends persist. A user turn reaches storage together
    with the assistant turn that answers it, so a crash between the two
    appends loses the user turn on disk.
    """

    def __init__(
        self,
        repository: SnapshotRepository,
        writer: SnapshotWriter,
        max_messages: int = MAX_HISTORY_MESSAGES,
    ) -> None:
        """Initialize the store.

        Args:
            repository: Backend holding private thread snapshots.
            writer: Persistence worker for private thread snapshots.
            max_messages: Number of turns kept per user.
        """
        self._writer = writer
        self._max_messages = max_messages
        self._cache: EntityCache[PrivateThread] = EntityCache(
            SnapshotKind.PRIVATE_THREAD,
            repository,
            decode=private_thread_from_snapshot,
            factory=lambda user_id: PrivateThread(user_id=user_id),
        )

    async def get_or_create(self, user_id: int) -> PrivateThread:
        """Get a user's thread, loading it from storage on first access."""
        return await self._cache.get_or_create(user_id)

    async def append_user(self, user_id: int, text: str) -> None:
        """Append a user turn (not persisted on its own)."""
        thread = await self._cache.get_or_create(user_id)
        async with thread.lock:
            thread.append(
                StoredTurn(
                    role=TurnRole.USER,
                    text=text,
                    timestamp=datetime.now(timezone.utc),
                    sender_id=user_id,
                ),
                self._max_messages,
            )

    async def append_assistant(self, user_id: int, text: str) -> None:
        """Append an assistant turn and schedule a snapshot of the thread."""
        thread = await self._cache.get_or_create(user_id)
        async with thread.lock:
            thread.append(
                StoredTurn(
                    role=TurnRole.ASSISTANT,
                    text=text,
                    timestamp=datetime.now(timezone.utc),
                    sender_id=0,
                ),
                self._max_messages,
            )
            await self._writer.schedule(user_id, private_thread_to_snapshot(thread))
        logger.debug("Private history: user=%s turns=%d", user_id, len(thread.turns))

    async def export_for_prompt(self, user_id: int) -> list[dict[str, str]]:
        """Return the history as ``{role, content}`` dicts, oldest first."""
        thread = await self._cache.get_or_create(user_id)
        return thread.to_prompt_messages()
