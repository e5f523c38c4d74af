"""Message formatting utilities for prompts."""

from xiaoniu.domain.entities import RoleTag

GROUP_CONTEXT_HEADER = "群聊消息："
ALL_MEMBERS_MENTION = "@全体成员"


def format_mention(role_tag: RoleTag, nickname: str) -> str:
    """Format a mention segment.

    Returns:
        Formatted string like "@【普通群友】alice"
    """
    return f"@【{role_tag.value}】{nickname}"


def format_group_line(role_tag: RoleTag, nickname: str, text: str) -> str:
    """Format one line of group history.

    Returns:
        Formatted string like "【普通群友】alice 发言说: hello"
    """
    return f"【{role_tag.value}】{nickname} 发言说: {text}"


def format_current_message(nickname: str, text: str) -> str:
    """Format the message being answered.

    Returns:
        Formatted string like "[alice]: hello"
    """
    return f"[{nickname}]: {text}"


def format_group_context(lines: list[str]) -> str:
    """Join formatted history lines under the group header.

    Args:
        lines: Lines already rendered by format_group_line.

    Returns:
        The header followed by one line per message, or "" when empty.
    """
    if not lines:
        return ""
    return GROUP_CONTEXT_HEADER + "\n" + "".join(f"{line}\n" for line in lines)
