import asyncio
import logging
from typing import List, Set
from leavedesk.exceptions import NotFoundError
from leavedesk.models.notifications import Notification
from leavedesk.schemas.notification import NotificationEvent
from leavedesk.stores.base import RecordStore
from leavedesk.utils.presence_utils import PresenceRegistry

logger = logging.getLogger(__name__)


def build_leave_message(status: str, leave_type: str) -> str:
    return f"Your leave request has been {status} : {leave_type}"


def notification_event(notification: Notification) -> dict:
    data = notification.model_dump(mode="json")
    data["date"] = data["created_at"]
    return NotificationEvent(data=data).model_dump()


class NotificationInbox:
    """Persisted per-user notifications, most recent first."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def prepend(self, notification: Notification) -> Notification:
        if not await self.store.prepend_notification(notification.recipient_id, notification.model_dump()):
            raise NotFoundError("User not found")
        return notification

    async def list_for(self, user_id: str) -> List[Notification]:
        notifications = await self.store.list_notifications(user_id)
        if notifications is None:
            raise NotFoundError("User not found")
        return [Notification(**notification) for notification in notifications]

    async def mark_read(self, user_id: str, notification_id: str) -> None:
        if not await self.store.mark_notification_read(user_id, notification_id):
            raise NotFoundError("Notification not found")


class NotificationDispatcher:
    """
    Best-effort push of notifications to users with a live channel.

    Pushes run as detached tasks on the running loop, so ``dispatch`` never
    waits on the channel. A failed push is logged and dropped: nothing is
    retried or queued, the inbox is the only durable copy.
    """

    def __init__(self, presence_registry: PresenceRegistry):
        self.presence_registry = presence_registry
        self._pending: Set[asyncio.Task] = set()

    def dispatch(self, user_id: str, notification: Notification) -> bool:
        channel = self.presence_registry.lookup(user_id)
        if channel is None:
            logger.info("User %s is offline, notification %s left in inbox", user_id, notification.id)
            return False

        task = asyncio.get_running_loop().create_task(
            self._push(user_id, channel, notification_event(notification))
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _push(self, user_id: str, channel, payload: dict) -> None:
        try:
            await channel.send_json(payload)
            logger.info("Pushed notification %s to user %s", payload["data"]["id"], user_id)
        except Exception:
            logger.exception("Failed to push notification to user %s", user_id)
