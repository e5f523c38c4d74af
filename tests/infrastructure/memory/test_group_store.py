"""Tests for GroupMemoryStore."""

from xiaoniu.domain.entities import SpecialIdentities
from xiaoniu.domain.repositories import SnapshotKind
from xiaoniu.infrastructure.memory import GroupMemoryStore, IdentityStore
from xiaoniu.infrastructure.persistence import (
    InMemorySnapshotRepository,
    SnapshotWriter,
)

GROUP_ID = 123456


class TestAppend:
    """append tests."""

    async def test_append(self, group_store: GroupMemoryStore) -> None:
        assert await group_store.append(GROUP_ID, 1, "hello") is True

        thread = await group_store.get_or_create(GROUP_ID)
        assert [(line.sender_id, line.text) for line in thread.lines] == [(1, "hello")]

    async def test_rejections(self, group_store: GroupMemoryStore) -> None:
        assert await group_store.append(0, 1, "hello") is False
        assert await group_store.append(GROUP_ID, 1, "") is False
        assert await group_store.append(GROUP_ID, 1, "长" * 501) is False

        thread = await group_store.get_or_create(GROUP_ID)
        assert thread.lines == []

    async def test_length_limit_counts_characters(
        self, group_store: GroupMemoryStore
    ) -> None:
        # 500 CJK characters are 1500 bytes in UTF-8 and still fit
        assert await group_store.append(GROUP_ID, 1, "长" * 500) is True

    async def test_bounded(
        self,
        identity_store: IdentityStore,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        store = GroupMemoryStore(
            identity_store,
            repository,
            writers[SnapshotKind.GROUP_THREAD],
            max_messages=3,
        )
        for i in range(5):
            await store.append(GROUP_ID, 1, str(i))

        thread = await store.get_or_create(GROUP_ID)
        assert [line.text for line in thread.lines] == ["2", "3", "4"]

    async def test_persists(
        self,
        group_store: GroupMemoryStore,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        await group_store.append(GROUP_ID, 1, "hello")
        await writers[SnapshotKind.GROUP_THREAD].flush()

        data = await repository.load(SnapshotKind.GROUP_THREAD, GROUP_ID)
        assert data is not None
        assert data["group_id"] == GROUP_ID
        assert data["messages"][0]["content"] == "hello"

    async def test_round_trip_after_restart(
        self,
        group_store: GroupMemoryStore,
        identity_store: IdentityStore,
        repository: InMemorySnapshotRepository,
        writers: dict[SnapshotKind, SnapshotWriter],
    ) -> None:
        await group_store.append(GROUP_ID, 1, "a")
        await group_store.append(GROUP_ID, 2, "b")
        await writers[SnapshotKind.GROUP_THREAD].flush()

        restarted = GroupMemoryStore(
            identity_store, repository, writers[SnapshotKind.GROUP_THREAD]
        )

        assert await restarted.get_or_create(GROUP_ID) == await group_store.get_or_create(
            GROUP_ID
        )


class TestExportForPrompt:
    """export_for_prompt tests."""

    async def test_empty(self, group_store: GroupMemoryStore) -> None:
        assert await group_store.export_for_prompt(GROUP_ID) == ("", None)

    async def test_single_line(self, group_store: GroupMemoryStore) -> None:
        await group_store.append(GROUP_ID, 1, "hello")

        context, last = await group_store.export_for_prompt(GROUP_ID)

        assert context == ""
        assert last is not None
        assert last.text == "hello"

    async def test_renders_earlier_lines(
        self,
        group_store: GroupMemoryStore,
        identity_store: IdentityStore,
        identities: SpecialIdentities,
    ) -> None:
        await identity_store.update_name(GROUP_ID, identities.master_id, "niuf")
        await identity_store.update_name(GROUP_ID, 777, "alice")
        await group_store.append(GROUP_ID, identities.master_id, "大家好")
        await group_store.append(GROUP_ID, identities.bot_id, "爸爸好")
        await group_store.append(GROUP_ID, 777, "小牛在吗")

        context, last = await group_store.export_for_prompt(GROUP_ID)

        assert context == (
            "群聊消息：\n"
            "【你的爸爸/主人】niuf 发言说: 大家好\n"
            "【你】小牛 发言说: 爸爸好\n"
        )
        assert last is not None
        assert (last.sender_id, last.text) == (777, "小牛在吗")
