"""Relay to master use case."""

import logging

from xiaoniu.application.use_cases.helpers import build_group_messages
from xiaoniu.config import PersonaConfig
from xiaoniu.domain.entities import ChannelKind, ChatEvent
from xiaoniu.domain.services import ChatCompleter, ReplySender
from xiaoniu.infrastructure.llm import LLMError, PromptBuilder
from xiaoniu.infrastructure.memory import GroupMemoryStore, IdentityStore

logger = logging.getLogger(__name__)

DEFAULT_RELAY_TEXT = "@了你的主人（爸爸）"


class RelayToMasterUseCase:
    """Tells the master in private why someone mentioned them in a group.

    The summary is not added to the group history since nobody in the
    group sees it.
    """

    def __init__(
        self,
        completer: ChatCompleter,
        prompt_builder: PromptBuilder,
        identity_store: IdentityStore,
        group_store: GroupMemoryStore,
        reply_sender: ReplySender,
        persona: PersonaConfig,
    ) -> None:
        """Initialize the use case.

        Args:
            completer: Chat completion service.
            prompt_builder: Builds the messages sent to the model.
            identity_store: Nickname resolution and the master's identity.
            group_store: Group conversation history.
            reply_sender: Service for sending replies.
            persona: Bot persona configuration.
        """
        self._completer = completer
        self._prompt_builder = prompt_builder
        self._identity_store = identity_store
        self._group_store = group_store
        self._reply_sender = reply_sender
        self._persona = persona

    async def execute(self, event: ChatEvent) -> None:
        master_id = self._identity_store.identities.master_id
        logger.info(
            "Master mentioned: group=%s user=%s text=%s",
            event.group_id,
            event.sender_id,
            event.text,
        )

        messages = await build_group_messages(
            event,
            self._prompt_builder.relay_hint(),
            self._prompt_builder,
            self._group_store,
            self._identity_store,
            fallback_text=event.text or DEFAULT_RELAY_TEXT,
        )

        try:
            answer = await self._completer.complete(messages)
        except LLMError as e:
            logger.error("Relay to master failed: group=%s error=%s", event.group_id, e)
            await self._reply_sender.send(
                ChannelKind.GROUP,
                event.sender_id,
                event.group_id,
                self._persona.error_reply,
            )
            return

        await self._reply_sender.send(
            ChannelKind.PRIVATE,
            master_id,
            0,
            answer or self._persona.fallback_answer,
        )
