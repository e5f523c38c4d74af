"""Entity <-> JSON snapshot conversion.

Field names follow the on-disk layout used since the first release of the
bot (``content``/``time``/``user_id``), so existing data files still load.
"""

from typing import Any

from xiaoniu.domain.entities import (
    GroupLine,
    GroupThread,
    IdentityMap,
    PrivateThread,
    StoredTurn,
    TurnRole,
)
from xiaoniu.infrastructure.persistence.datetime_utils import (
    normalize_to_utc,
    parse_timestamp,
)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def private_thread_to_snapshot(thread: PrivateThread) -> dict[str, Any]:
    """Convert a private thread to its snapshot.

    Args:
        thread: PrivateThread entity

    Returns:
        JSON-serializable dict
    """
    return {
        "user_id": thread.user_id,
        "messages": [
            {
                "role": turn.role.value,
                "content": turn.text,
                "time": normalize_to_utc(turn.timestamp).isoformat(),
                "user_id": turn.sender_id,
            }
            for turn in thread.turns
        ],
    }


def private_thread_from_snapshot(data: dict[str, Any], user_id: int) -> PrivateThread:
    """Build a private thread from its snapshot.

    Turns with an unknown role are skipped.

    Args:
        data: Snapshot dict
        user_id: Key the snapshot was stored under

    Returns:
        PrivateThread entity
    """
    turns: list[StoredTurn] = []
    for item in data.get("messages") or []:
        if not isinstance(item, dict):
            continue
        try:
            role = TurnRole(item.get("role"))
        except ValueError:
            continue
        turns.append(
            StoredTurn(
                role=role,
                text=_as_str(item.get("content")),
                timestamp=parse_timestamp(item.get("time")),
                sender_id=_as_int(item.get("user_id")),
            )
        )
    return PrivateThread(user_id=user_id, turns=turns)


def group_thread_to_snapshot(thread: GroupThread) -> dict[str, Any]:
    """Convert a group thread to its snapshot."""
    return {
        "group_id": thread.group_id,
        "messages": [
            {
                "user_id": line.sender_id,
                "content": line.text,
                "time": normalize_to_utc(line.timestamp).isoformat(),
            }
            for line in thread.lines
        ],
    }


def group_thread_from_snapshot(data: dict[str, Any], group_id: int) -> GroupThread:
    """Build a group thread from its snapshot."""
    lines = [
        GroupLine(
            sender_id=_as_int(item.get("user_id")),
            text=_as_str(item.get("content")),
            timestamp=parse_timestamp(item.get("time")),
        )
        for item in data.get("messages") or []
        if isinstance(item, dict)
    ]
    return GroupThread(group_id=group_id, lines=lines)


def identity_map_to_snapshot(identity_map: IdentityMap) -> dict[str, Any]:
    """Convert an identity map to its snapshot.

    JSON object keys are strings, so user ids are written as decimal text.
    """
    return {
        "group_id": identity_map.group_id,
        "nicknames": {
            str(user_id): name for user_id, name in identity_map.nicknames.items()
        },
    }


def identity_map_from_snapshot(data: dict[str, Any], group_id: int) -> IdentityMap:
    """Build an identity map from its snapshot."""
    nicknames: dict[int, str] = {}
    raw = data.get("nicknames")
    if isinstance(raw, dict):
        for key, name in raw.items():
            user_id = _as_int(key)
            if user_id and isinstance(name, str):
                nicknames[user_id] = name
    return IdentityMap(group_id=group_id, nicknames=nicknames)
