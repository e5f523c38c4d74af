"""Per-group nickname map entity."""

import asyncio
from dataclasses import dataclass, field


@dataclass
class IdentityMap:
    """Last observed display name of each member of a group.

    Attributes:
        group_id: Group identity.
        nicknames: Numeric identity to display name.
    """

    group_id: int
    nicknames: dict[int, str] = field(default_factory=dict)
    lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, compare=False, repr=False
    )

    def update(self, user_id: int, name: str) -> bool:
        """Store a name unless it is already the stored value.

        Returns:
            True if the map changed.
        """
        if self.nicknames.get(user_id) == name:
            return False
        self.nicknames[user_id] = name
        return True

    def lookup(self, user_id: int) -> str | None:
        """Return the stored name, or None when absent or empty."""
        return self.nicknames.get(user_id) or None
