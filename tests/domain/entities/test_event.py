"""Tests for chat event entities."""

import pytest

from xiaoniu.domain.entities import ChannelKind, ChatEvent, MentionClass


class TestChannelKind:
    """ChannelKind tests."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("private", ChannelKind.PRIVATE),
            ("group", ChannelKind.GROUP),
            ("guild", ChannelKind.OTHER),
            (None, ChannelKind.OTHER),
            (1, ChannelKind.OTHER),
        ],
    )
    def test_from_message_type(self, value: object, expected: ChannelKind) -> None:
        assert ChannelKind.from_message_type(value) is expected


class TestMentionClass:
    """MentionClass priority tests."""

    def test_higher_priority_wins(self) -> None:
        assert MentionClass.NONE.merge(MentionClass.OTHER) is MentionClass.OTHER
        assert MentionClass.OTHER.merge(MentionClass.BOT) is MentionClass.BOT
        assert MentionClass.BOT.merge(MentionClass.MASTER) is MentionClass.MASTER

    def test_master_is_never_downgraded(self) -> None:
        result = MentionClass.MASTER
        for later in (MentionClass.BOT, MentionClass.OTHER, MentionClass.NONE):
            result = result.merge(later)
        assert result is MentionClass.MASTER

    def test_bot_is_not_downgraded_by_other(self) -> None:
        assert MentionClass.BOT.merge(MentionClass.OTHER) is MentionClass.BOT


class TestChatEvent:
    """ChatEvent tests."""

    def test_defaults(self) -> None:
        event = ChatEvent(channel_kind=ChannelKind.PRIVATE)

        assert event.sender_id == 0
        assert event.group_id == 0
        assert event.text == ""
        assert event.mention_class is MentionClass.NONE
        assert event.is_private

    def test_is_group_requires_group_id(self) -> None:
        assert ChatEvent(channel_kind=ChannelKind.GROUP, group_id=1).is_group
        assert not ChatEvent(channel_kind=ChannelKind.GROUP, group_id=0).is_group
        assert not ChatEvent(channel_kind=ChannelKind.PRIVATE, group_id=1).is_group

    def test_is_frozen(self) -> None:
        event = ChatEvent(channel_kind=ChannelKind.PRIVATE, text="hi")

        with pytest.raises(AttributeError):
            event.text = "changed"  # type: ignore[misc]
