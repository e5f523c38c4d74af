"""Group nickname store with pseudonym fallback."""

import logging

from xiaoniu.domain.entities import IdentityMap, RoleTag, SpecialIdentities
from xiaoniu.domain.repositories import SnapshotKind, SnapshotRepository
from xiaoniu.domain.services import format_group_line, format_mention, stable_id
from xiaoniu.infrastructure.persistence.cache import EntityCache
from xiaoniu.infrastructure.persistence.snapshots import (
    identity_map_from_snapshot,
    identity_map_to_snapshot,
)
from xiaoniu.infrastructure.persistence.writer import SnapshotWriter

logger = logging.getLogger(__name__)


class IdentityStore:
    """Resolves numeric identities to display names and role tags.

    Names are learned per group from incoming messages and persisted as one
    snapshot per group. Users without a known name (and every user in a
    private chat) are shown under their stable pseudonym.
    """

    def __init__(
        self,
        identities: SpecialIdentities,
        bot_name: str,
        repository: SnapshotRepository,
        writer: SnapshotWriter,
    ) -> None:
        """Initialize the store.

        Args:
            identities: Configured bot/master/partner identities.
            bot_name: Name the bot is shown under.
            repository: Backend holding nickname snapshots.
            writer: Persistence worker for nickname snapshots.
        """
        self._identities = identities
        self._bot_name = bot_name
        self._writer = writer
        self._cache: EntityCache[IdentityMap] = EntityCache(
            SnapshotKind.IDENTITY_MAP,
            repository,
            decode=identity_map_from_snapshot,
            factory=lambda group_id: IdentityMap(group_id=group_id),
        )

    @property
    def identities(self) -> SpecialIdentities:
        return self._identities

    async def get_or_create(self, group_id: int) -> IdentityMap:
        """Get the nickname map of a group."""
        return await self._cache.get_or_create(group_id)

    def resolve_role_tag(self, user_id: int) -> RoleTag:
        """Classify an identity (master > partner > self > ordinary)."""
        return self._identities.role_of(user_id)

    async def resolve_name(self, group_id: int, user_id: int) -> str:
        """Get the name a user is shown under.

        Args:
            group_id: Group the name is looked up in (0 for private chats).
            user_id: User identity.

        Returns:
            The bot's name for the bot itself, the last seen group nickname
            when known, else the stable pseudonym.
        """
        if self._identities.is_bot(user_id):
            return self._bot_name
        if group_id == 0:
            return stable_id(user_id)

        identity_map = await self._cache.get_or_create(group_id)
        return identity_map.lookup(user_id) or stable_id(user_id)

    async def update_name(self, group_id: int, user_id: int, name: str) -> bool:
        """Record a user's display name in a group.

        Nothing is written when the name is empty, outside groups, or when
        the stored name is already the same.

        Returns:
            True if the map changed and a snapshot was scheduled.
        """
        if not name or group_id == 0:
            return False

        identity_map = await self._cache.get_or_create(group_id)
        async with identity_map.lock:
            if not identity_map.update(user_id, name):
                return False
            logger.debug("Nickname updated: group=%s user=%s", group_id, user_id)
            await self._writer.schedule(
                group_id, identity_map_to_snapshot(identity_map)
            )
        return True

    async def format_mention(self, group_id: int, user_id: int) -> str:
        """Render a mention as ``@【roleTag】nickname``."""
        name = await self.resolve_name(group_id, user_id)
        return format_mention(self.resolve_role_tag(user_id), name)

    async def format_line(self, group_id: int, user_id: int, text: str) -> str:
        """Render a history line as ``【roleTag】nickname 发言说: text``."""
        name = await self.resolve_name(group_id, user_id)
        return format_group_line(self.resolve_role_tag(user_id), name, text)
