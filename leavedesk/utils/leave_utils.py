from typing import List, Optional
from leavedesk.exceptions import NotFoundError
from leavedesk.models.leaves import Leave
from leavedesk.stores.base import RecordStore


class LeaveStore:
    """Leave requests keyed by id, scoped by owner or unscoped for admins."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def create(self, leave: Leave) -> Leave:
        record = await self.store.insert_leave(leave.model_dump(exclude={"id"}))
        return Leave(**record)

    async def get(self, leave_id: str) -> Leave:
        record = await self.store.get_leave(leave_id)
        if record is None:
            raise NotFoundError("Leave not found")
        return Leave(**record)

    async def list_for_owner(self, owner_id: str) -> List[Leave]:
        return [Leave(**record) for record in await self.store.find_leaves(owner_id=owner_id)]

    async def list_all(self) -> List[Leave]:
        return [Leave(**record) for record in await self.store.find_leaves()]

    async def compare_and_swap_status(self, leave_id: str, expected_status: str, fields: dict) -> Optional[Leave]:
        record = await self.store.compare_and_swap_status(leave_id, expected_status, fields)
        return Leave(**record) if record else None
