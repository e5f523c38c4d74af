"""Helper functions for use cases."""

from xiaoniu.domain.entities import ChatEvent
from xiaoniu.domain.services import format_current_message
from xiaoniu.infrastructure.llm import PromptBuilder
from xiaoniu.infrastructure.memory import GroupMemoryStore, IdentityStore


async def build_group_messages(
    event: ChatEvent,
    hint: str,
    prompt_builder: PromptBuilder,
    group_store: GroupMemoryStore,
    identity_store: IdentityStore,
    fallback_text: str | None = None,
) -> list[dict[str, str]]:
    """Build the messages for answering in a group.

    The rendered group history goes in as one user turn, followed by the
    latest line of the group as ``[nickname]: text``. The adapter has
    already appended the current message, so the latest line is normally
    the one being answered.

    Args:
        event: Group event being answered.
        hint: Speaker hint for the system prompt.
        prompt_builder: Prompt builder.
        group_store: Group history.
        identity_store: Nickname resolution for the latest line.
        fallback_text: Current turn when the group history is empty
            (defaults to the event text).

    Returns:
        Messages for the chat completion.
    """
    context, last_line = await group_store.export_for_prompt(event.group_id)

    if last_line is not None:
        nickname = await identity_store.resolve_name(
            event.group_id, last_line.sender_id
        )
        current = format_current_message(nickname, last_line.text)
    else:
        current = fallback_text if fallback_text is not None else event.text

    return prompt_builder.build_messages(
        current,
        is_group=True,
        hint=hint,
        context=context,
    )
