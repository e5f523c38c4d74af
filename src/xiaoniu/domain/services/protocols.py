"""Domain service protocols."""

from typing import Any, Protocol

from xiaoniu.domain.entities import ChannelKind


class ReplySender(Protocol):
    """Outbound messaging abstraction (transport-independent).

    The core only calls ``send``; delivery failures are the sender's concern.
    """

    async def send(
        self,
        channel_kind: ChannelKind,
        user_id: int,
        group_id: int,
        text: str,
    ) -> None:
        """Send a message.

        Args:
            channel_kind: Private or group.
            user_id: Target user (private) or the user being answered (group).
            group_id: Target group, 0 for private messages.
            text: Message content.
        """
        ...


class ChatCompleter(Protocol):
    """Chat completion abstraction.

    Accepts OpenAI-style ``{role, content}`` turns in order (system, history,
    current turn) and returns the generated text.
    """

    async def complete(
        self,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str:
        """Generate a reply.

        Raises:
            LLMError: If the upstream call fails.
        """
        ...
