"""Ordered event dispatcher."""

import asyncio
import logging
from collections.abc import Coroutine
from enum import Enum
from typing import Any, Protocol

from xiaoniu.application.services import RepeatDetector
from xiaoniu.domain.entities import ChannelKind, ChatEvent, MentionClass
from xiaoniu.domain.services import ReplySender

logger = logging.getLogger(__name__)


class DispatchOutcome(Enum):
    """Which branch of the chain handled an event."""

    REPEAT = "repeat"
    LOCAL_COMMAND = "local_command"
    RELAY_TO_MASTER = "relay_to_master"
    AI_CHAT = "ai_chat"
    DROPPED = "dropped"


class EventUseCase(Protocol):
    async def execute(self, event: ChatEvent) -> None: ...


class CommandUseCase(EventUseCase, Protocol):
    def matches(self, text: str) -> bool: ...


class EventDispatcher:
    """Routes each chat event to exactly one behavior.

    The branches are tried in order and the first match wins:

    1. repeat echo (groups only)
    2. local command
    3. relay to master (groups only, master configured)
    4. AI chat
    5. drop

    Branches that call the language model run as background tasks so the
    gateway can keep reading; the others complete before ``dispatch``
    returns.
    """

    def __init__(
        self,
        repeat_detector: RepeatDetector,
        local_command: CommandUseCase,
        ai_chat: EventUseCase,
        relay_to_master: EventUseCase,
        reply_sender: ReplySender,
        master_id: int = 0,
        call_name: str = "小牛",
    ) -> None:
        """Initialize the dispatcher.

        Args:
            repeat_detector: Detects streaks of identical group messages.
            local_command: Fixed keyword command.
            ai_chat: Language model conversation.
            relay_to_master: Forwards master mentions to the master.
            reply_sender: Used to echo repeated messages.
            master_id: Configured master identity (0 disables relaying).
            call_name: Keyword that summons the bot in groups.
        """
        self._repeat_detector = repeat_detector
        self._local_command = local_command
        self._ai_chat = ai_chat
        self._relay_to_master = relay_to_master
        self._reply_sender = reply_sender
        self._master_id = master_id
        self._call_name = call_name
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of background tasks still running."""
        return len(self._tasks)

    async def dispatch(self, event: ChatEvent) -> DispatchOutcome:
        """Dispatch an event to the first matching behavior.

        Args:
            event: Normalized chat event.

        Returns:
            The branch that handled the event.
        """
        if event.is_group:
            echo = await self._repeat_detector.observe(event)
            if echo is not None:
                await self._reply_sender.send(
                    ChannelKind.GROUP, event.sender_id, event.group_id, echo
                )
                return DispatchOutcome.REPEAT

        if self._local_command.matches(event.text):
            await self._local_command.execute(event)
            return DispatchOutcome.LOCAL_COMMAND

        if (
            event.is_group
            and self._master_id > 0
            and event.mention_class is MentionClass.MASTER
        ):
            self._spawn("relay_to_master", self._relay_to_master.execute(event))
            return DispatchOutcome.RELAY_TO_MASTER

        if self._wants_ai_chat(event):
            self._spawn("ai_chat", self._ai_chat.execute(event))
            return DispatchOutcome.AI_CHAT

        return DispatchOutcome.DROPPED

    async def drain(self) -> None:
        """Wait for every background task, including ones spawned meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _wants_ai_chat(self, event: ChatEvent) -> bool:
        if event.is_private:
            return True
        if event.mention_class is MentionClass.BOT:
            return True
        return bool(self._call_name) and self._call_name in event.text

    def _spawn(self, name: str, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(self._run(name, coro), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @staticmethod
    async def _run(name: str, coro: Coroutine[Any, Any, None]) -> None:
        try:
            await coro
        except Exception:
            logger.exception("Error in %s task", name)
