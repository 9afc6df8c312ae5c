import logging
from typing import Dict, List
from leavedesk.exceptions import AccountExistsError, NotFoundError
from leavedesk.models.accounts import Account
from leavedesk.stores.base import RecordStore

logger = logging.getLogger(__name__)


class BalanceLedger:
    """
    Per-account, per-leave-type day balances.

    Debits and credits are unconditional atomic increments on the store; the
    ledger never floors a balance at zero. Sufficiency checks belong to the
    caller.
    """

    def __init__(self, store: RecordStore, default_balances: Dict[str, int]):
        self.store = store
        self.default_balances = dict(default_balances)

    async def open_account(self, user_id: str, name: str, email: str, is_admin: bool = False) -> Account:
        account = Account(
            id=user_id,
            name=name,
            email=email,
            is_admin=is_admin,
            leave_balance=dict(self.default_balances),
        )
        if not await self.store.insert_account(account.model_dump()):
            raise AccountExistsError("User already exists")

        logger.info("Opened account %s with balances %s", user_id, account.leave_balance)
        return account

    async def get_account(self, user_id: str) -> Account:
        account = await self.store.get_account(user_id)
        if account is None:
            raise NotFoundError("User not found")
        return Account(**account)

    async def get_accounts(self, user_ids: List[str]) -> Dict[str, Account]:
        accounts = await self.store.get_accounts(user_ids)
        return {user_id: Account(**account) for user_id, account in accounts.items()}

    async def get(self, user_id: str, leave_type: str) -> int:
        account = await self.get_account(user_id)
        return account.leave_balance.get(leave_type, 0)

    async def debit(self, user_id: str, leave_type: str, amount: int) -> int:
        return await self._adjust(user_id, leave_type, -amount)

    async def credit(self, user_id: str, leave_type: str, amount: int) -> int:
        return await self._adjust(user_id, leave_type, amount)

    async def _adjust(self, user_id: str, leave_type: str, amount: int) -> int:
        balance = await self.store.adjust_balance(user_id, leave_type, amount)
        if balance is None:
            raise NotFoundError("User not found")

        logger.info("Balance %s/%s adjusted by %+d to %d", user_id, leave_type, amount, balance)
        return balance
