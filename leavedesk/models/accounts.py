from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import Dict, List

UTC = timezone.utc


class Account(BaseModel):
    id: str
    name: str
    email: str
    is_admin: bool = False
    leave_balance: Dict[str, int] = Field(default_factory=dict) # {"annual": 20, "sick": 10, "personal": 5}
    notifications: List[dict] = Field(default_factory=list)  # most recent first
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
