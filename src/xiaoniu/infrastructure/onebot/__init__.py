"""OneBot v11 protocol integration."""

from xiaoniu.infrastructure.onebot.event_adapter import OneBotEventAdapter
from xiaoniu.infrastructure.onebot.messaging import OneBotReplySender

__all__ = ["OneBotEventAdapter", "OneBotReplySender"]
