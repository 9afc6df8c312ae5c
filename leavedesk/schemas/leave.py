from datetime import date
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from leavedesk.models.leaves import Leave, LeaveStatus, LeaveType
from leavedesk.schemas.account import AccountProfile, RequesterSummary


class CreateLeave(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    leave_type: LeaveType = Field(alias="type")
    start_date: date
    end_date: date
    days: int = Field(gt=0)
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before the start date")
        return self


class UpdateLeaveStatus(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: LeaveStatus
    rejection_reason: Optional[str] = None


class LeaveWithOwner(Leave):
    user: Optional[AccountProfile] = None


class LeaveWithRequester(Leave):
    user: Optional[RequesterSummary] = None
