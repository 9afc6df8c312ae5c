from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

UTC = timezone.utc


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Leave(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = None
    owner_id: str
    leave_type: LeaveType
    start_date: datetime
    end_date: datetime
    days: int = Field(gt=0)
    reason: Optional[str] = None # personal leave only
    status: LeaveStatus = LeaveStatus.PENDING
    rejection_reason: Optional[str] = None
    requested_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: Optional[datetime] = None
