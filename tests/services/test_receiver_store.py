"""Tests for the in-memory receiver store."""

import pytest

from alert_notify.exceptions import ReceiverNotFoundError
from alert_notify.models import AlarmLevel, AlertReceiverCreate, AlertReceiverUpdate, ChannelType
from alert_notify.services.alerts import ReceiverStore


@pytest.fixture
def store():
    return ReceiverStore()


def wework(name="ops"):
    return AlertReceiverCreate(name=name, type=ChannelType.WEWORK_ROBOT, wechat_id="abc123")


class TestReceiverStore:
    def test_add_assigns_id(self, store):
        receiver = store.add(wework())

        assert receiver.id
        assert store.get(receiver.id) == receiver
        assert len(store) == 1

    def test_list_filters_by_type(self, store):
        store.add(wework("a"))
        store.add(AlertReceiverCreate(name="b", type=ChannelType.EMAIL, email="b@example.com"))
        store.add(wework("c"))

        assert [r.name for r in store.list()] == ["a", "b", "c"]
        assert [r.name for r in store.list(ChannelType.WEWORK_ROBOT)] == ["a", "c"]
        assert store.list(ChannelType.DISCORD_WEBHOOK) == []

    def test_update_changes_only_given_fields(self, store):
        receiver = store.add(wework())

        updated = store.update(
            receiver.id,
            AlertReceiverUpdate(match_all=False, levels=[AlarmLevel.CRITICAL]),
        )

        assert updated.match_all is False
        assert updated.levels == [AlarmLevel.CRITICAL]
        assert updated.wechat_id == "abc123"
        assert updated.name == "ops"
        assert updated.date_created == receiver.date_created
        assert updated.date_updated >= receiver.date_updated

    def test_returned_copies_do_not_alter_store(self, store):
        receiver = store.add(wework())
        copy = store.get(receiver.id)
        copy.name = "changed"

        assert store.get(receiver.id).name == "ops"

    def test_delete(self, store):
        receiver = store.add(wework())

        store.delete(receiver.id)

        assert store.list() == []
        with pytest.raises(ReceiverNotFoundError):
            store.get(receiver.id)

    @pytest.mark.parametrize("operation", ["get", "delete"])
    def test_unknown_id(self, store, operation):
        with pytest.raises(ReceiverNotFoundError) as exc_info:
            getattr(store, operation)("missing")

        assert exc_info.value.error_code == "R002"
        assert exc_info.value.receiver_id == "missing"

    def test_update_unknown_id(self, store):
        with pytest.raises(ReceiverNotFoundError):
            store.update("missing", AlertReceiverUpdate(enabled=False))
