"""Identity classification entities."""

from dataclasses import dataclass
from enum import Enum


class RoleTag(Enum):
    """Coarse role of a numeric identity.

    Values are the labels rendered into prompts.
    """

    MASTER = "你的爸爸/主人"
    PARTNER = "爸爸的女朋友"
    SELF = "你"
    ORDINARY = "普通群友"


@dataclass(frozen=True)
class SpecialIdentities:
    """Configured identities with a special relationship to the bot.

    Attributes:
        bot_id: The bot's own account.
        master_id: The bot's owner (0 when not configured).
        partner_id: The owner's partner (0 when not configured).
    """

    bot_id: int
    master_id: int = 0
    partner_id: int = 0

    def is_bot(self, user_id: int) -> bool:
        """Check whether the id is the bot itself or the zero sentinel."""
        return user_id == 0 or user_id == self.bot_id

    def is_master(self, user_id: int) -> bool:
        return self.master_id > 0 and user_id == self.master_id

    def is_partner(self, user_id: int) -> bool:
        return self.partner_id > 0 and user_id == self.partner_id

    def role_of(self, user_id: int) -> RoleTag:
        """Classify an identity.

        Precedence is master, partner, self, ordinary. The special categories
        are exclusive even if the configuration reuses an id.
        """
        if self.is_master(user_id):
            return RoleTag.MASTER
        if self.is_partner(user_id):
            return RoleTag.PARTNER
        if self.is_bot(user_id):
            return RoleTag.SELF
        return RoleTag.ORDINARY
