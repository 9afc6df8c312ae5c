from fastapi import APIRouter, Depends, status
from typing import List
from leavedesk.models.leaves import Leave
from leavedesk.schemas.leave import CreateLeave, LeaveWithOwner, LeaveWithRequester, UpdateLeaveStatus
from leavedesk.services import get_notification_inbox, get_workflow_engine
from leavedesk.utils.app_utils import get_current_admin, get_current_user
from leavedesk.utils.notification_utils import NotificationInbox
from leavedesk.utils.workflow_utils import WorkflowEngine

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint to verify if the service is running.
    Returns:
        dict: A simple message indicating the service is running.
    """
    return {"message": "Leave Service is running"}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Leave)
async def create_leave(
    leave_request: CreateLeave,
    user_and_type: tuple = Depends(get_current_user),
    workflow_engine: WorkflowEngine = Depends(get_workflow_engine)
):
    """
    Create a new leave request for the authenticated user.
    The request starts as pending. The balance for the requested type is checked
    but not deducted; deduction happens when an admin approves it.
    Args:
        leave_request (CreateLeave): type, start and end dates, number of days and,
            for personal leave only, a reason.
        user_and_type (tuple): Tuple containing user information and user type from authentication.
    Returns:
        Leave: The created leave request.
    Raises:
        HTTPException:
            - 400: If the balance is insufficient, or personal leave has no reason
            - 404: If the user has no account
    """
    user, _ = user_and_type

    return await workflow_engine.create_request(
        owner_id=user["id"],
        leave_type=leave_request.leave_type,
        start_date=leave_request.start_date,
        end_date=leave_request.end_date,
        days=leave_request.days,
        reason=leave_request.reason,
    )


@router.get("", response_model=List[LeaveWithOwner])
async def list_my_leaves(
    user_and_type: tuple = Depends(get_current_user),
    workflow_engine: WorkflowEngine = Depends(get_workflow_engine)
):
    """List the caller's leave requests, most recent first, with the requester expanded."""
    user, _ = user_and_type
    return await workflow_engine.list_requests_for_owner(user["id"])


@router.get("/all", response_model=List[LeaveWithRequester])
async def list_all_leaves(
    user_and_type: tuple = Depends(get_current_admin),
    workflow_engine: WorkflowEngine = Depends(get_workflow_engine)
):
    """List every leave request, most recent first. Admin only."""
    return await workflow_engine.list_all_requests()


@router.put("/notify/{notification_id}")
async def mark_notification_read(
    notification_id: str,
    user_and_type: tuple = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_notification_inbox)
):
    """
    Mark a notification as read for the current user.
    Args:
        notification_id (str): The ID of the notification to mark as read
        user_and_type (tuple): Tuple containing user information and type (from dependency)
    Returns:
        dict: A message confirming the notification was marked as read
    Raises:
        HTTPException: 404 if the notification does not belong to the caller
    """
    user, _ = user_and_type
    await inbox.mark_read(user["id"], notification_id)
    return {"message": "Notification marked as read"}


@router.put("/{leave_id}", response_model=Leave)
async def update_leave_status(
    leave_id: str,
    status_update: UpdateLeaveStatus,
    user_and_type: tuple = Depends(get_current_admin),
    workflow_engine: WorkflowEngine = Depends(get_workflow_engine)
):
    """
    Change the status of a leave request. Admin only.
    Approving a pending annual or sick leave deducts its days from the owner's
    balance and moving it back to pending restores them. Personal leave never
    affects the balance. The owner gets a notification in their inbox, pushed
    live when they are connected. Setting the current status again does nothing.
    Args:
        leave_id (str): The ID of the leave request.
        status_update (UpdateLeaveStatus): New status and optional rejection reason.
    Returns:
        Leave: The leave request after the change.
    Raises:
        HTTPException:
            - 403: If the user is not an admin
            - 404: If the leave request is not found
    """
    return await workflow_engine.transition_status(
        leave_id,
        status_update.status,
        rejection_reason=status_update.rejection_reason,
    )
