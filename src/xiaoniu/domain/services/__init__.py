"""Domain services."""

from xiaoniu.domain.services.message_formatter import (
    format_current_message,
    format_group_context,
    format_group_line,
    format_mention,
)
from xiaoniu.domain.services.protocols import ChatCompleter, ReplySender
from xiaoniu.domain.services.stable_id import stable_id

__all__ = [
    "ChatCompleter",
    "ReplySender",
    "format_current_message",
    "format_group_context",
    "format_group_line",
    "format_mention",
    "stable_id",
]
