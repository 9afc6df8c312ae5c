from datetime import datetime, timezone
from bson import ObjectId
from pydantic import BaseModel, Field

UTC = timezone.utc


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(ObjectId()))
    recipient_id: str
    message: str
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
