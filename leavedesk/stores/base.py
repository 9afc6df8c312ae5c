from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class RecordStore(ABC):
    """
    Persistence contract for accounts, leave requests and inboxes.

    Documents are plain dicts keyed by ``id`` (a string). Every method that
    mutates state is a single indivisible operation on the backing store:
    callers never read-modify-write a document themselves.
    """

    # accounts

    @abstractmethod
    async def insert_account(self, account: dict) -> bool:
        """Insert an account, returns False if one with the same id exists."""

    @abstractmethod
    async def get_account(self, account_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def get_accounts(self, account_ids: List[str]) -> Dict[str, dict]:
        ...

    @abstractmethod
    async def adjust_balance(self, account_id: str, leave_type: str, amount: int) -> Optional[int]:
        """Add ``amount`` (may be negative) to a balance and return the new value."""

    # leaves

    @abstractmethod
    async def insert_leave(self, leave: dict) -> dict:
        ...

    @abstractmethod
    async def get_leave(self, leave_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def find_leaves(self, owner_id: Optional[str] = None) -> List[dict]:
        """Leaves sorted by ``requested_at`` descending, optionally for one owner."""

    @abstractmethod
    async def compare_and_swap_status(self, leave_id: str, expected_status: str, fields: dict) -> Optional[dict]:
        """
        Apply ``fields`` only if the leave still has ``expected_status``.
        Returns the updated leave, or None when the status moved on.
        """

    # inbox

    @abstractmethod
    async def prepend_notification(self, account_id: str, notification: dict) -> bool:
        ...

    @abstractmethod
    async def list_notifications(self, account_id: str) -> Optional[List[dict]]:
        ...

    @abstractmethod
    async def mark_notification_read(self, account_id: str, notification_id: str) -> bool:
        """True when the notification exists for that account (already read or not)."""
