"""Tests for PrivateMemoryStore."""

from xiaoniu.domain.entities import TurnRole
from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.memory import PrivateMemoryStore
from xiaoniu.infrastructure.persistence import (
    InMemorySnapshotRepository,
    SnapshotWriter,
)

USER_ID = 55555


class TestPrivateMemoryStore:
    """PrivateMemoryStore tests."""

    async def test_export_empty(self, private_store: PrivateMemoryStore) -> None:
        assert await private_store.export_for_prompt(USER_ID) == []

    async def test_append_and_export(self, private_store: PrivateMemoryStore) -> None:
        await private_store.append_user(USER_ID, "你好")
        await private_store.append_assistant(USER_ID, "你好呀")

        assert await private_store.export_for_prompt(USER_ID) == [
            {"role": "user", "content": "你好"},
            {"role": "assistant", "content": "你好呀"},
        ]

    async def test_sender_ids(self, private_store: PrivateMemoryStore) -> None:
        await private_store.append_user(USER_ID, "a")
        await private_store.append_assistant(USER_ID, "b")

        thread = await private_store.get_or_create(USER_ID)

        assert [(t.role, t.sender_id) for t in thread.turns] == [
            (TurnRole.USER, USER_ID),
            (TurnRole.ASSISTANT, 0),
        ]

    async def test_user_turn_alone_is_not_persisted(
        self,
        private_store: PrivateMemoryStore,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        await private_store.append_user(USER_ID, "a")
        await writers[SnapshotKind.PRIVATE_THREAD].flush()

        assert await repository.load(SnapshotKind.PRIVATE_THREAD, USER_ID) is None

    async def test_assistant_turn_persists_both(
        self,
        private_store: PrivateMemoryStore,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        await private_store.append_user(USER_ID, "a")
        await private_store.append_assistant(USER_ID, "b")
        await writers[SnapshotKind.PRIVATE_THREAD].flush()

        data = await repository.load(SnapshotKind.PRIVATE_THREAD, USER_ID)
        assert data is not None
        assert [m["content"] for m in data["messages"]] == ["a", "b"]

    async def test_history_is_bounded(
        self,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        store = PrivateMemoryStore(
            repository, writers[SnapshotKind.PRIVATE_THREAD], max_messages=4
        )
        for i in range(3):
            await store.append_user(USER_ID, f"q{i}")
            await store.append_assistant(USER_ID, f"a{i}")

        messages = await store.export_for_prompt(USER_ID)

        assert [m["content"] for m in messages] == ["q1", "a1", "q2", "a2"]

    async def test_round_trip_after_restart(
        self,
        private_store: PrivateMemoryStore,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        await private_store.append_user(USER_ID, "a")
        await private_store.append_assistant(USER_ID, "b")
        await writers[SnapshotKind.PRIVATE_THREAD].flush()

        restarted = PrivateMemoryStore(repository, writers[SnapshotKind.PRIVATE_THREAD])

        assert await restarted.get_or_create(USER_ID) == await private_store.get_or_create(
            USER_ID
        )
