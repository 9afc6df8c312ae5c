import asyncio

import pytest

from leavedesk.exceptions import AccountExistsError, NotFoundError
from leavedesk.models.notifications import Notification
from leavedesk.utils.notification_utils import build_leave_message, notification_event
from leavedesk.utils.presence_utils import PresenceRegistry


def run(coro):
    return asyncio.run(coro)


def test_presence_announce_lookup_and_overwrite(channel):
    registry = PresenceRegistry()
    other = object()

    assert registry.lookup("emp-1") is None
    registry.announce("emp-1", channel)
    assert registry.lookup("emp-1") is channel

    registry.announce("emp-1", other)
    assert registry.lookup("emp-1") is other
    assert len(registry) == 1


def test_presence_remove_by_channel(channel):
    registry = PresenceRegistry()
    other = object()
    registry.announce("emp-1", channel)
    registry.announce("emp-2", other)

    assert registry.remove(channel) == "emp-1"
    assert registry.lookup("emp-1") is None
    assert registry.lookup("emp-2") is other
    assert registry.remove(channel) is None


def test_channel_announced_under_a_new_id_drops_its_old_entry(channel):
    registry = PresenceRegistry()
    registry.announce("emp-1", channel)
    registry.announce("emp-2", channel)

    assert registry.lookup("emp-1") is None
    assert registry.lookup("emp-2") is channel
    assert registry.remove(channel) == "emp-2"
    assert len(registry) == 0


def test_superseded_channel_disconnect_leaves_newer_entry(channel):
    # single slot per user: the older tab is no longer registered at all
    registry = PresenceRegistry()
    newer = object()
    registry.announce("emp-1", channel)
    registry.announce("emp-1", newer)

    assert registry.remove(channel) is None
    assert registry.lookup("emp-1") is newer


def test_notification_event_payload():
    notification = Notification(recipient_id="emp-1", message=build_leave_message("approved", "annual"))

    event = notification_event(notification)

    assert event["event"] == "newNotification"
    assert event["data"]["message"] == "Your leave request has been approved : annual"
    assert event["data"]["read"] is False
    assert event["data"]["id"] == notification.id
    assert event["data"]["date"] == event["data"]["created_at"]


def test_inbox_is_most_recent_first(services):
    async def scenario():
        await services.ledger.open_account("emp-1", "Ada", "ada@example.com")
        for message in ("first", "second", "third"):
            await services.inbox.prepend(Notification(recipient_id="emp-1", message=message))
        return await services.inbox.list_for("emp-1")

    inbox = run(scenario())

    assert [n.message for n in inbox] == ["third", "second", "first"]


def test_mark_read_is_idempotent_for_the_owner(services):
    async def scenario():
        await services.ledger.open_account("emp-1", "Ada", "ada@example.com")
        notification = await services.inbox.prepend(Notification(recipient_id="emp-1", message="hello"))
        await services.inbox.mark_read("emp-1", notification.id)
        await services.inbox.mark_read("emp-1", notification.id)
        return await services.inbox.list_for("emp-1")

    inbox = run(scenario())

    assert inbox[0].read is True


def test_mark_read_of_someone_elses_notification(services):
    async def scenario():
        await services.ledger.open_account("emp-1", "Ada", "ada@example.com")
        await services.ledger.open_account("emp-2", "Alan", "alan@example.com")
        notification = await services.inbox.prepend(Notification(recipient_id="emp-1", message="hello"))
        with pytest.raises(NotFoundError):
            await services.inbox.mark_read("emp-2", notification.id)
        with pytest.raises(NotFoundError):
            await services.inbox.mark_read("emp-1", "missing")
        return await services.inbox.list_for("emp-1")

    inbox = run(scenario())

    assert inbox[0].read is False


def test_inbox_for_unknown_user(services):
    with pytest.raises(NotFoundError):
        run(services.inbox.list_for("ghost"))
    with pytest.raises(NotFoundError):
        run(services.inbox.prepend(Notification(recipient_id="ghost", message="hello")))


def test_open_account_uses_default_balances_once(services):
    async def scenario():
        account = await services.ledger.open_account("emp-1", "Ada", "ada@example.com")
        with pytest.raises(AccountExistsError):
            await services.ledger.open_account("emp-1", "Ada", "ada@example.com")
        return account

    account = run(scenario())

    assert account.leave_balance == {"annual": 20, "sick": 10, "personal": 5}
    assert account.notifications == []


def test_ledger_debit_and_credit_are_unconditional(services):
    async def scenario():
        await services.ledger.open_account("emp-1", "Ada", "ada@example.com")
        await services.ledger.debit("emp-1", "personal", 7)
        overdrawn = await services.ledger.get("emp-1", "personal")
        await services.ledger.credit("emp-1", "personal", 7)
        return overdrawn, await services.ledger.get("emp-1", "personal")

    assert run(scenario()) == (-2, 5)


def test_ledger_unknown_user(services):
    with pytest.raises(NotFoundError):
        run(services.ledger.debit("ghost", "annual", 1))
    with pytest.raises(NotFoundError):
        run(services.ledger.get("ghost", "annual"))
