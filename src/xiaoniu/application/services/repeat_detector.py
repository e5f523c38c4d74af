"""Repeat detector service."""

import logging

from xiaoniu.domain.entities import ChatEvent, RepeatWindow, SpecialIdentities
from xiaoniu.domain.entities.repeat_window import REPEAT_WINDOW_SIZE

logger = logging.getLogger(__name__)


class RepeatDetector:
    """Detects streaks of identical group messages.

    Each group keeps its own window of the most recent texts. When the
    window fills up with the same text, that text is returned once so the
    bot can join in, and the window starts over.
    """

    def __init__(
        self,
        identities: SpecialIdentities,
        window_size: int = REPEAT_WINDOW_SIZE,
    ) -> None:
        """Initialize the detector.

        Args:
            identities: Configured identities (bot messages are ignored).
            window_size: Streak length that triggers an echo.
        """
        self._identities = identities
        self._window_size = window_size
        self._windows: dict[int, RepeatWindow] = {}

    def window(self, group_id: int) -> RepeatWindow:
        """Get the window of a group, creating it on first use."""
        window = self._windows.get(group_id)
        if window is None:
            window = RepeatWindow(capacity=self._window_size)
            self._windows[group_id] = window
        return window

    async def observe(self, event: ChatEvent) -> str | None:
        """Feed a group event into its window.

        Bot messages and empty texts are ignored: they neither enter nor
        reset the window.

        Args:
            event: Group chat event.

        Returns:
            The text to echo when a streak completes, else None.
        """
        if not event.is_group or not event.text:
            return None
        if self._identities.is_bot(event.sender_id):
            return None

        window = self.window(event.group_id)
        async with window.lock:
            repeated = window.push(event.text)

        if repeated is not None:
            logger.info("Repeat detected: group=%s text=%s", event.group_id, repeated)
        return repeated
