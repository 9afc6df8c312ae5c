from datetime import datetime
from pydantic import BaseModel, EmailStr
from typing import Dict


class CreateAccount(BaseModel):
    name: str
    email: EmailStr


class AccountProfile(BaseModel):
    id: str
    name: str
    email: str
    is_admin: bool
    leave_balance: Dict[str, int]
    created_at: datetime


class RequesterSummary(BaseModel):
    id: str
    name: str
    email: str
