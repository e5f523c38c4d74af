"""AI chat use case."""

import logging

from xiaoniu.application.use_cases.helpers import build_group_messages
from xiaoniu.config import PersonaConfig
from xiaoniu.domain.entities import ChatEvent
from xiaoniu.domain.services import ChatCompleter, ReplySender
from xiaoniu.infrastructure.llm import LLMError, PromptBuilder
from xiaoniu.infrastructure.memory import (
    GroupMemoryStore,
    IdentityStore,
    PrivateMemoryStore,
)

logger = logging.getLogger(__name__)


class AIChatUseCase:
    """Use case for answering a message with the language model.

    Private chats carry their own history; group chats are answered from
    the shared group history; anything else is answered without history.
    """

    def __init__(
        self,
        completer: ChatCompleter,
        prompt_builder: PromptBuilder,
        identity_store: IdentityStore,
        private_store: PrivateMemoryStore,
        group_store: GroupMemoryStore,
        reply_sender: ReplySender,
        persona: PersonaConfig,
    ) -> None:
        """Initialize the use case.

        Args:
            completer: Chat completion service.
            prompt_builder: Builds the messages sent to the model.
            identity_store: Role and nickname resolution.
            private_store: Private conversation history.
            group_store: Group conversation history.
            reply_sender: Service for sending replies.
            persona: Bot persona configuration.
        """
        self._completer = completer
        self._prompt_builder = prompt_builder
        self._identity_store = identity_store
        self._private_store = private_store
        self._group_store = group_store
        self._reply_sender = reply_sender
        self._persona = persona

    async def execute(self, event: ChatEvent) -> None:
        """Execute the use case.

        Processing flow:
        1. Answer a bare mention with the canned line
        2. Build the messages for the channel
        3. Generate the answer (apologize on failure)
        4. Record the exchange in memory
        5. Send the answer

        Args:
            event: The received event.
        """
        if not event.text:
            await self._reply(event, self._persona.empty_mention_reply)
            return

        logger.info(
            "AI chat <- user=%s group=%s: %s",
            event.sender_id,
            event.group_id,
            event.text,
        )
        role = self._identity_store.resolve_role_tag(event.sender_id)
        hint = self._prompt_builder.role_hint(role)

        try:
            if event.is_private:
                answer = await self._chat_private(event, hint)
            elif event.is_group:
                answer = await self._chat_group(event, hint)
            else:
                messages = self._prompt_builder.build_messages(event.text, hint=hint)
                answer = await self._generate(messages)
        except LLMError as e:
            logger.error("AI chat failed: user=%s error=%s", event.sender_id, e)
            await self._reply(event, self._persona.error_reply)
            return

        await self._reply(event, answer)

    async def _chat_private(self, event: ChatEvent, hint: str) -> str:
        history = await self._private_store.export_for_prompt(event.sender_id)
        messages = self._prompt_builder.build_messages(
            event.text, hint=hint, history=history
        )
        answer = await self._generate(messages)

        # Both turns are recorded only once the model has answered
        await self._private_store.append_user(event.sender_id, event.text)
        await self._private_store.append_assistant(event.sender_id, answer)
        return answer

    async def _chat_group(self, event: ChatEvent, hint: str) -> str:
        messages = await build_group_messages(
            event,
            hint,
            self._prompt_builder,
            self._group_store,
            self._identity_store,
        )
        answer = await self._generate(messages)
        await self._group_store.append(
            event.group_id, self._identity_store.identities.bot_id, answer
        )
        return answer

    async def _generate(self, messages: list[dict[str, str]]) -> str:
        answer = await self._completer.complete(messages)
        return answer or self._persona.fallback_answer

    async def _reply(self, event: ChatEvent, text: str) -> None:
        await self._reply_sender.send(
            event.channel_kind, event.sender_id, event.group_id, text
        )
