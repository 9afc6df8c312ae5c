from pydantic import BaseModel
from datetime import datetime

NEW_NOTIFICATION_EVENT = "newNotification"


class NotificationResponse(BaseModel):
    id: str
    recipient_id: str
    message: str
    read: bool
    created_at: datetime


class NotificationEvent(BaseModel):
    """Payload pushed over a live channel when a notification is created."""
    event: str = NEW_NOTIFICATION_EVENT
    data: dict
