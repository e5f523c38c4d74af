"""Private conversation thread entity."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

MAX_HISTORY_MESSAGES = 50


class TurnRole(Enum):
    """Speaker of a stored turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class StoredTurn:
    """One turn of a private conversation.

    Attributes:
        role: User or assistant.
        text: Turn content.
        timestamp: When the turn was recorded.
        sender_id: Sender identity for user turns, 0 for assistant turns.
    """

    role: TurnRole
    text: str
    timestamp: datetime
    sender_id: int = 0


@dataclass
class PrivateThread:
    """Bounded history of one user's private conversation.

    Mutations must happen while holding ``lock``.

    Attributes:
        user_id: Owner of the conversation.
        turns: Turns in arrival order, oldest first.
    """

    user_id: int
    turns: list[StoredTurn] = field(default_factory=list)
    lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, compare=False, repr=False
    )

    def append(self, turn: StoredTurn, limit: int = MAX_HISTORY_MESSAGES) -> None:
        """Append a turn and drop the oldest turns beyond ``limit``."""
        self.turns.append(turn)
        if len(self.turns) > limit:
            del self.turns[: len(self.turns) - limit]

    def to_prompt_messages(self) -> list[dict[str, str]]:
        """Snapshot the turns as OpenAI-style ``{role, content}`` dicts."""
        return [{"role": turn.role.value, "content": turn.text} for turn in self.turns]
