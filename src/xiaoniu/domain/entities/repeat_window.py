"""Sliding window of recent group messages for repeat detection."""

import asyncio
from dataclasses import dataclass, field

REPEAT_WINDOW_SIZE = 3


@dataclass
class RepeatWindow:
    """Most recent message texts of one group.

    Attributes:
        capacity: Streak length that triggers an echo.
        texts: Recent texts, oldest first.
    """

    capacity: int = REPEAT_WINDOW_SIZE
    texts: list[str] = field(default_factory=list)
    lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, compare=False, repr=False
    )

    def push(self, text: str) -> str | None:
        """Record a text and report a completed streak.

        When the window is full of identical texts it is cleared, so the
        same streak cannot trigger twice.

        Returns:
            The repeated text when a streak completes, else None.
        """
        self.texts.append(text)
        if len(self.texts) > self.capacity:
            del self.texts[: len(self.texts) - self.capacity]

        if len(self.texts) == self.capacity and len(set(self.texts)) == 1:
            self.texts.clear()
            return text
        return None
