import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Union
from leavedesk.exceptions import InsufficientBalanceError, LeaveValidationError, TransitionConflictError
from leavedesk.models.leaves import Leave, LeaveStatus, LeaveType
from leavedesk.models.notifications import Notification
from leavedesk.schemas.account import AccountProfile, RequesterSummary
from leavedesk.schemas.leave import LeaveWithOwner, LeaveWithRequester
from leavedesk.utils.balance_utils import BalanceLedger
from leavedesk.utils.leave_utils import LeaveStore
from leavedesk.utils.notification_utils import NotificationDispatcher, NotificationInbox, build_leave_message

UTC = timezone.utc

logger = logging.getLogger(__name__)


def compute_balance_delta(old_status: str, new_status: str, leave_type: str, days: int) -> int:
    """
    Balance change implied by a status transition.

    Only pending -> approved debits and only approved -> pending credits back.
    Leaving approved for rejected does not restore the days, and personal
    leave never touches the balance.
    """
    if leave_type == LeaveType.PERSONAL:
        return 0
    if old_status == LeaveStatus.PENDING and new_status == LeaveStatus.APPROVED:
        return -days
    if old_status == LeaveStatus.APPROVED and new_status == LeaveStatus.PENDING:
        return days
    return 0


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    return datetime.combine(value, datetime.min.time(), UTC)


class WorkflowEngine:
    """
    Leave request lifecycle: creation against a balance and admin-driven
    status transitions with their balance and notification side effects.
    """

    def __init__(
        self,
        ledger: BalanceLedger,
        leaves: LeaveStore,
        inbox: NotificationInbox,
        dispatcher: NotificationDispatcher,
        max_attempts: int = 5,
    ):
        self.ledger = ledger
        self.leaves = leaves
        self.inbox = inbox
        self.dispatcher = dispatcher
        self.max_attempts = max_attempts

    async def create_request(
        self,
        owner_id: str,
        leave_type: str,
        start_date: Union[date, datetime],
        end_date: Union[date, datetime],
        days: int,
        reason: Optional[str] = None,
    ) -> Leave:
        """
        Create a pending leave request.
        The balance is checked, not reserved: nothing is debited until approval.
        Raises:
            LeaveValidationError: unknown type, non-positive days, or personal leave without a reason
            NotFoundError: the owner has no account
            InsufficientBalanceError: the balance for the type is below ``days``
        """
        try:
            leave_type = LeaveType(leave_type).value
        except ValueError:
            raise LeaveValidationError(f"Unknown leave type {leave_type!r}")

        if days <= 0:
            raise LeaveValidationError("Leave days must be a positive number")

        if leave_type == LeaveType.PERSONAL:
            if not reason or not reason.strip():
                raise LeaveValidationError("A reason is required for personal leave")
        else:
            reason = None

        balance = await self.ledger.get(owner_id, leave_type)
        if balance < days:
            raise InsufficientBalanceError(f"Insufficient {leave_type} leave balance")

        leave = await self.leaves.create(Leave(
            owner_id=owner_id,
            leave_type=leave_type,
            start_date=_as_datetime(start_date),
            end_date=_as_datetime(end_date),
            days=days,
            reason=reason,
        ))
        logger.info("Leave %s created for %s (%s, %d days)", leave.id, owner_id, leave_type, days)
        return leave

    async def transition_status(
        self,
        leave_id: str,
        new_status: str,
        rejection_reason: Optional[str] = None,
    ) -> Leave:
        """
        Move a leave request to ``new_status``.

        Setting the status it already has returns the request untouched, with
        no balance change and no notification. Otherwise the status is swapped
        only if nobody changed it since it was read; a lost race reloads and
        re-evaluates. After the swap the balance delta is applied; if that
        write fails the previous status is put back and the error propagates,
        so a retry starts from the original state. Then a notification is
        stored and pushed on a best-effort basis.
        Raises:
            LeaveValidationError: unknown status
            NotFoundError: no such leave
            TransitionConflictError: the status kept changing under us
        """
        try:
            new_status = LeaveStatus(new_status).value
        except ValueError:
            raise LeaveValidationError(f"Unknown leave status {new_status!r}")

        for _ in range(self.max_attempts):
            leave = await self.leaves.get(leave_id)
            if leave.status == new_status:
                logger.info("Leave %s already %s, nothing to do", leave_id, new_status)
                return leave

            delta = compute_balance_delta(leave.status, new_status, leave.leave_type, leave.days)

            fields = {"status": new_status, "updated_at": datetime.now(UTC)}
            if new_status == LeaveStatus.REJECTED:
                fields["rejection_reason"] = rejection_reason

            updated = await self.leaves.compare_and_swap_status(leave_id, leave.status, fields)
            if updated is None:
                logger.warning("Leave %s changed while moving %s -> %s, retrying", leave_id, leave.status, new_status)
                continue

            try:
                if delta < 0:
                    await self.ledger.debit(leave.owner_id, leave.leave_type, -delta)
                elif delta > 0:
                    await self.ledger.credit(leave.owner_id, leave.leave_type, delta)
            except Exception:
                await self._restore_status(leave, new_status)
                raise

            logger.info("Leave %s moved %s -> %s (balance delta %+d)", leave_id, leave.status, new_status, delta)
            await self._notify(updated)
            return updated

        raise TransitionConflictError("Leave status changed concurrently, please retry")

    async def _restore_status(self, leave: Leave, new_status: str) -> None:
        """Undo a status swap whose balance change could not be written."""
        logger.error("Balance update failed for leave %s, restoring status %s", leave.id, leave.status)
        try:
            restored = await self.leaves.compare_and_swap_status(leave.id, new_status, {
                "status": leave.status,
                "updated_at": leave.updated_at,
                "rejection_reason": leave.rejection_reason,
            })
        except Exception:
            logger.exception("Could not restore status of leave %s", leave.id)
            return
        if restored is None:
            logger.error("Leave %s changed before its status could be restored", leave.id)

    async def _notify(self, leave: Leave) -> None:
        notification = Notification(
            recipient_id=leave.owner_id,
            message=build_leave_message(leave.status, leave.leave_type),
        )
        try:
            await self.inbox.prepend(notification)
        except Exception:
            logger.exception("Could not store notification for leave %s", leave.id)
            return

        try:
            self.dispatcher.dispatch(leave.owner_id, notification)
        except Exception:
            logger.exception("Could not dispatch notification %s", notification.id)

    async def list_requests_for_owner(self, owner_id: str) -> List[LeaveWithOwner]:
        account = await self.ledger.get_account(owner_id)
        profile = AccountProfile(**account.model_dump(exclude={"notifications"}))
        return [
            LeaveWithOwner(**leave.model_dump(), user=profile)
            for leave in await self.leaves.list_for_owner(owner_id)
        ]

    async def list_all_requests(self) -> List[LeaveWithRequester]:
        leaves = await self.leaves.list_all()
        accounts = await self.ledger.get_accounts([leave.owner_id for leave in leaves])

        leave_data = []
        for leave in leaves:
            requester = None
            account = accounts.get(leave.owner_id)
            if account:
                requester = RequesterSummary(id=account.id, name=account.name, email=account.email)
            leave_data.append(LeaveWithRequester(**leave.model_dump(), user=requester))
        return leave_data
