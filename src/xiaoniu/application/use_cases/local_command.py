"""Local command use case."""

import logging

from xiaoniu.config import PersonaConfig
from xiaoniu.domain.entities import ChatEvent
from xiaoniu.domain.services import ReplySender

logger = logging.getLogger(__name__)


class LocalCommandUseCase:
    """Answers the command keyword with a fixed reply, without the model."""

    def __init__(self, reply_sender: ReplySender, persona: PersonaConfig) -> None:
        self._reply_sender = reply_sender
        self._keyword = persona.command_keyword
        self._reply = persona.command_reply

    def matches(self, text: str) -> bool:
        """Check whether the text is exactly the command keyword."""
        return bool(self._keyword) and text == self._keyword

    async def execute(self, event: ChatEvent) -> None:
        logger.info("Local command: user=%s text=%s", event.sender_id, event.text)
        await self._reply_sender.send(
            event.channel_kind, event.sender_id, event.group_id, self._reply
        )
