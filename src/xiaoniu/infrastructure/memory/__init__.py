"""In-memory conversation stores backed by snapshot persistence."""

from xiaoniu.infrastructure.memory.group_store import GroupMemoryStore
from xiaoniu.infrastructure.memory.identity_store import IdentityStore
from xiaoniu.infrastructure.memory.private_store import PrivateMemoryStore

__all__ = [
    "GroupMemoryStore",
    "IdentityStore",
    "PrivateMemoryStore",
]
