"""Chat event entity produced by the gateway adapter."""

from dataclasses import dataclass
from enum import Enum


class ChannelKind(Enum):
    """Where a message was posted."""

    PRIVATE = "private"
    GROUP = "group"
    OTHER = "other"

    @classmethod
    def from_message_type(cls, value: object) -> "ChannelKind":
        """Map a OneBot ``message_type`` to a channel kind.

        Unknown or non-string values fall back to ``OTHER``.
        """
        if value == "private":
            return cls.PRIVATE
        if value == "group":
            return cls.GROUP
        return cls.OTHER


class MentionClass(Enum):
    """Who a message mentions, ordered by priority.

    The numeric value is the rank: a higher rank always wins, so a master
    mention is never downgraded by a later bot or other mention.
    """

    NONE = 0
    OTHER = 1
    BOT = 2
    MASTER = 3

    def merge(self, other: "MentionClass") -> "MentionClass":
        """Return whichever of the two classes has the higher priority."""
        return other if other.value > self.value else self


@dataclass(frozen=True)
class ChatEvent:
    """One inbound chat message, normalized.

    Attributes:
        channel_kind: Private, group or other.
        sender_id: Numeric identity of the sender.
        group_id: Numeric group identity (0 outside groups).
        text: Mention-expanded, whitespace-trimmed content.
        raw_text: Original segment payload, kept for diagnostics.
        mention_class: Highest-priority mention found in the message.
    """

    channel_kind: ChannelKind
    sender_id: int = 0
    group_id: int = 0
    text: str = ""
    raw_text: str = ""
    mention_class: MentionClass = MentionClass.NONE

    @property
    def is_private(self) -> bool:
        return self.channel_kind is ChannelKind.PRIVATE

    @property
    def is_group(self) -> bool:
        """Group message with a usable group id."""
        return self.channel_kind is ChannelKind.GROUP and self.group_id > 0
