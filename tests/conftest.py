"""Common fixtures."""

import os
from collections.abc import AsyncGenerator

import pytest

# Use litellm's bundled model cost map; its network fetch at import time can
# deadlock the importer when offline.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from xiaoniu.config import PersonaConfig
from xiaoniu.domain.entities import SpecialIdentities
from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.memory import (
    GroupMemoryStore,
    IdentityStore,
    PrivateMemoryStore,
)
from xiaoniu.infrastructure.persistence import (
    InMemorySnapshotRepository,
    SnapshotWriter,
)

BOT_ID = 10001
MASTER_ID = 20002
PARTNER_ID = 30003
GROUP_ID = 123456
USER_ID = 55555


@pytest.fixture
def identities() -> SpecialIdentities:
    """Create configured identities."""
    return SpecialIdentities(bot_id=BOT_ID, master_id=MASTER_ID, partner_id=PARTNER_ID)


@pytest.fixture
def persona() -> PersonaConfig:
    """Create default persona config."""
    return PersonaConfig()


@pytest.fixture
def repository() -> InMemorySnapshotRepository:
    """Create an in-memory snapshot repository."""
    return InMemorySnapshotRepository()


@pytest.fixture
async def writers(
    repository: InMemorySnapshotRepository,
) -> AsyncGenerator[dict[SnapshotKind, SnapshotWriter], None]:
    """Start one snapshot writer per kind, stopped after the test."""
    writers = {kind: SnapshotWriter(repository, kind) for kind in SnapshotKind}
    for writer in writers.values():
        writer.start()
    yield writers
    for writer in writers.values():
        await writer.flush()
        await writer.stop()


@pytest.fixture
def identity_store(
    identities: SpecialIdentities,
    repository: InMemorySnapshotRepository,
    writers: dict[SnapshotKind, SnapshotWriter],
) -> IdentityStore:
    """Create an identity store."""
    return IdentityStore(
        identities, "小牛", repository, writers[SnapshotKind.IDENTITY_MAP]
    )


@pytest.fixture
def private_store(
    repository: InMemorySnapshotRepository,
    writers: dict[SnapshotKind, SnapshotWriter],
) -> PrivateMemoryStore:
    """Create a private memory store."""
    return PrivateMemoryStore(repository, writers[SnapshotKind.PRIVATE_THREAD])


@pytest.fixture
def group_store(
    identity_store: IdentityStore,
    repository: InMemorySnapshotRepository,
    writers: dict[SnapshotKind, SnapshotWriter],
) -> GroupMemoryStore:
    """Create a group memory store."""
    return GroupMemoryStore(
        identity_store, repository, writers[SnapshotKind.GROUP_THREAD]
    )
