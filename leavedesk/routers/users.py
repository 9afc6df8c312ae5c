from fastapi import APIRouter, Depends, status
from typing import List
from leavedesk.schemas.account import AccountProfile, CreateAccount
from leavedesk.schemas.notification import NotificationResponse
from leavedesk.services import get_balance_ledger, get_notification_inbox
from leavedesk.utils.app_utils import get_current_user
from leavedesk.utils.balance_utils import BalanceLedger
from leavedesk.utils.notification_utils import NotificationInbox

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AccountProfile)
async def register_account(
    account: CreateAccount,
    user_and_type: tuple = Depends(get_current_user),
    ledger: BalanceLedger = Depends(get_balance_ledger)
):
    """
    Open a leave account for the authenticated identity.
    The account starts with the default balances for every leave type and an
    empty inbox. Admin rights come from the identity's role.
    Raises:
        HTTPException: 400 if the account already exists
    """
    user, user_type = user_and_type
    return await ledger.open_account(
        user_id=user["id"],
        name=account.name,
        email=account.email,
        is_admin=user_type == "admin",
    )


@router.get("/profile", response_model=AccountProfile)
async def get_profile(
    user_and_type: tuple = Depends(get_current_user),
    ledger: BalanceLedger = Depends(get_balance_ledger)
):
    user, _ = user_and_type
    return await ledger.get_account(user["id"])


@router.get("/notifications", response_model=List[NotificationResponse])
async def get_notifications(
    user_and_type: tuple = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_notification_inbox)
):
    """Inbox of the current user, most recent first, read and unread."""
    user, _ = user_and_type
    return await inbox.list_for(user["id"])
