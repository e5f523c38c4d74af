"""Domain entities."""

from xiaoniu.domain.entities.event import ChannelKind, ChatEvent, MentionClass
from xiaoniu.domain.entities.group_thread import GroupLine, GroupThread
from xiaoniu.domain.entities.identity import RoleTag, SpecialIdentities
from xiaoniu.domain.entities.identity_map import IdentityMap
from xiaoniu.domain.entities.private_thread import PrivateThread, StoredTurn, TurnRole
from xiaoniu.domain.entities.repeat_window import RepeatWindow

__all__ = [
    "ChannelKind",
    "ChatEvent",
    "GroupLine",
    "GroupThread",
    "IdentityMap",
    "MentionClass",
    "PrivateThread",
    "RepeatWindow",
    "RoleTag",
    "SpecialIdentities",
    "StoredTurn",
    "TurnRole",
]
