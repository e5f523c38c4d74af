"""Group chat context entity."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

MAX_GROUP_CONTEXT_MESSAGES = 50
MAX_MESSAGE_LENGTH = 500


@dataclass(frozen=True)
class GroupLine:
    """One visible message in a group, bot replies included.

    Attributes:
        sender_id: Identity of the speaker.
        text: Message content.
        timestamp: When the line was recorded.
    """

    sender_id: int
    text: str
    timestamp: datetime


@dataclass
class GroupThread:
    """Bounded recent history of one group.

    Mutations must happen while holding ``lock``.

    Attributes:
        group_id: Group identity.
        lines: Lines in arrival order, oldest first.
    """

    group_id: int
    lines: list[GroupLine] = field(default_factory=list)
    lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, compare=False, repr=False
    )

    def append(
        self, line: GroupLine, limit: int = MAX_GROUP_CONTEXT_MESSAGES
    ) -> None:
        """Append a line and drop the oldest lines beyond ``limit``."""
        self.lines.append(line)
        if len(self.lines) > limit:
            del self.lines[: len(self.lines) - limit]

    def split_last(self) -> tuple[list[GroupLine], GroupLine | None]:
        """Split the thread into earlier lines and the latest line."""
        if not self.lines:
            return [], None
        return list(self.lines[:-1]), self.lines[-1]
