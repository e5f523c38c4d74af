"""OneBot event adapter."""

import json
import logging
from typing import Any

from xiaoniu.domain.entities import ChannelKind, ChatEvent, MentionClass
from xiaoniu.domain.services.message_formatter import ALL_MEMBERS_MENTION
from xiaoniu.infrastructure.memory import GroupMemoryStore, IdentityStore

logger = logging.getLogger(__name__)


def as_int(value: Any) -> int:
    """Read a numeric identity, defaulting to 0.

    JSON integers, integral floats and decimal strings are accepted.
    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdecimal():
            return int(stripped)
    return 0


def display_name(sender: Any) -> str:
    """Pick the group card if set, else the account nickname."""
    if not isinstance(sender, dict):
        return ""
    for key in ("card", "nickname"):
        value = sender.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


class OneBotEventAdapter:
    """Convert OneBot message payloads to chat events.

    Besides translating the payload, the adapter keeps the memory in step
    with what is seen in groups: the sender's display name is recorded
    before mentions are rendered, and the rendered text is appended to the
    group history.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        group_store: GroupMemoryStore,
    ) -> None:
        """Initialize the adapter.

        Args:
            identity_store: Nickname store, also provides the special identities.
            group_store: Group history the rendered messages are appended to.
        """
        self._identity_store = identity_store
        self._group_store = group_store

    async def to_event(self, payload: dict[str, Any]) -> ChatEvent:
        """Convert a ``post_type == "message"`` payload to a ChatEvent.

        Missing or malformed fields fall back to defaults; this never raises
        on bad input.

        Args:
            payload: Decoded OneBot event.

        Returns:
            ChatEvent entity.
        """
        channel_kind = ChannelKind.from_message_type(payload.get("message_type"))
        sender_id = as_int(payload.get("user_id"))
        group_id = as_int(payload.get("group_id"))
        in_group = channel_kind is ChannelKind.GROUP and group_id > 0

        if in_group:
            name = display_name(payload.get("sender"))
            await self._identity_store.update_name(group_id, sender_id, name)

        segments = self._segments(payload.get("message"))
        parts: list[str] = []
        mention_class = MentionClass.NONE

        for segment in segments:
            segment_type = segment.get("type")
            data = segment.get("data")
            if not isinstance(data, dict):
                continue

            if segment_type == "text":
                text = data.get("text")
                if isinstance(text, str):
                    parts.append(text)
            elif segment_type == "at":
                rendered, mentioned = await self._render_mention(
                    group_id if in_group else 0, data.get("qq")
                )
                if rendered:
                    parts.append(rendered)
                    mention_class = mention_class.merge(mentioned)

        text = "".join(parts).strip()
        event = ChatEvent(
            channel_kind=channel_kind,
            sender_id=sender_id,
            group_id=group_id,
            text=text,
            raw_text=self._raw_text(payload.get("message")),
            mention_class=mention_class,
        )

        if in_group and text and not self._identity_store.identities.is_bot(sender_id):
            await self._group_store.append(group_id, sender_id, text)

        logger.debug(
            "Event: kind=%s user=%s group=%s mention=%s",
            channel_kind.value,
            sender_id,
            group_id,
            mention_class.name,
        )
        return event

    async def _render_mention(
        self, group_id: int, qq: Any
    ) -> tuple[str, MentionClass]:
        """Render an ``at`` segment and classify who it points at."""
        if qq == "all":
            return ALL_MEMBERS_MENTION, MentionClass.OTHER

        user_id = as_int(qq)
        if user_id <= 0:
            return "", MentionClass.NONE

        identities = self._identity_store.identities
        if identities.is_master(user_id):
            mentioned = MentionClass.MASTER
        elif user_id == identities.bot_id:
            mentioned = MentionClass.BOT
        else:
            mentioned = MentionClass.OTHER

        rendered = await self._identity_store.format_mention(group_id, user_id)
        return rendered, mentioned

    @staticmethod
    def _segments(message: Any) -> list[dict[str, Any]]:
        if isinstance(message, str):
            return [{"type": "text", "data": {"text": message}}]
        if isinstance(message, list):
            return [segment for segment in message if isinstance(segment, dict)]
        return []

    @staticmethod
    def _raw_text(message: Any) -> str:
        if isinstance(message, str):
            return message
        if message is None:
            return ""
        try:
            return json.dumps(message, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(message)
