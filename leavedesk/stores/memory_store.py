import copy
import threading
from typing import Dict, List, Optional
from bson import ObjectId
from leavedesk.stores.base import RecordStore


class MemoryRecordStore(RecordStore):
    """In-process store, not shared across instances. Used for tests and local runs."""

    def __init__(self) -> None:
        self._accounts: Dict[str, dict] = {}
        self._leaves: Dict[str, dict] = {}
        self._lock = threading.RLock()

    async def insert_account(self, account: dict) -> bool:
        with self._lock:
            if account["id"] in self._accounts:
                return False
            self._accounts[account["id"]] = copy.deepcopy(account)
            return True

    async def get_account(self, account_id: str) -> Optional[dict]:
        with self._lock:
            account = self._accounts.get(account_id)
            return copy.deepcopy(account) if account else None

    async def get_accounts(self, account_ids: List[str]) -> Dict[str, dict]:
        with self._lock:
            return {
                account_id: copy.deepcopy(self._accounts[account_id])
                for account_id in set(account_ids)
                if account_id in self._accounts
            }

    async def adjust_balance(self, account_id: str, leave_type: str, amount: int) -> Optional[int]:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            balance = account["leave_balance"]
            balance[leave_type] = balance.get(leave_type, 0) + amount
            return balance[leave_type]

    async def insert_leave(self, leave: dict) -> dict:
        with self._lock:
            record = copy.deepcopy(leave)
            record["id"] = str(ObjectId())
            self._leaves[record["id"]] = record
            return copy.deepcopy(record)

    async def get_leave(self, leave_id: str) -> Optional[dict]:
        with self._lock:
            leave = self._leaves.get(leave_id)
            return copy.deepcopy(leave) if leave else None

    async def find_leaves(self, owner_id: Optional[str] = None) -> List[dict]:
        with self._lock:
            leaves = [
                copy.deepcopy(leave) for leave in self._leaves.values()
                if owner_id is None or leave["owner_id"] == owner_id
            ]
        return sorted(leaves, key=lambda leave: leave["requested_at"], reverse=True)

    async def compare_and_swap_status(self, leave_id: str, expected_status: str, fields: dict) -> Optional[dict]:
        with self._lock:
            leave = self._leaves.get(leave_id)
            if leave is None or leave["status"] != expected_status:
                return None
            leave.update(copy.deepcopy(fields))
            return copy.deepcopy(leave)

    async def prepend_notification(self, account_id: str, notification: dict) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            account["notifications"].insert(0, copy.deepcopy(notification))
            return True

    async def list_notifications(self, account_id: str) -> Optional[List[dict]]:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            return copy.deepcopy(account["notifications"])

    async def mark_notification_read(self, account_id: str, notification_id: str) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            for notification in account["notifications"]:
                if notification["id"] == notification_id:
                    notification["read"] = True
                    return True
            return False
