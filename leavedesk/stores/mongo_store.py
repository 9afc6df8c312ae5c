from typing import Dict, List, Optional
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from leavedesk.stores.base import RecordStore


def _to_object_id(leave_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(leave_id)
    except (InvalidId, TypeError):
        return None


def _leave_from_document(document: dict) -> dict:
    document["id"] = str(document.pop("_id"))
    return document


def _account_from_document(document: dict) -> dict:
    document["id"] = document.pop("_id")
    return document


class MongoRecordStore(RecordStore):
    """
    MongoDB implementation backed by Motor.

    Accounts live in ``users`` keyed by the identity's subject, with the inbox
    embedded as a ``notifications`` array. Leaves live in ``leaves`` keyed by
    ObjectId.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self.users_collection = database.users
        self.leaves_collection = database.leaves

    async def insert_account(self, account: dict) -> bool:
        document = dict(account)
        account_id = document.pop("id")
        # only the first registration for an id inserts
        result = await self.users_collection.update_one(
            {"_id": account_id},
            {"$setOnInsert": document},
            upsert=True
        )
        return result.upserted_id is not None

    async def get_account(self, account_id: str) -> Optional[dict]:
        document = await self.users_collection.find_one({"_id": account_id})
        return _account_from_document(document) if document else None

    async def get_accounts(self, account_ids: List[str]) -> Dict[str, dict]:
        accounts = {}
        cursor = self.users_collection.find(
            {"_id": {"$in": list(set(account_ids))}},
            {"notifications": 0}
        )
        async for document in cursor:
            account = _account_from_document(document)
            accounts[account["id"]] = account
        return accounts

    async def adjust_balance(self, account_id: str, leave_type: str, amount: int) -> Optional[int]:
        document = await self.users_collection.find_one_and_update(
            {"_id": account_id},
            {"$inc": {f"leave_balance.{leave_type}": amount}},
            projection={"leave_balance": 1},
            return_document=ReturnDocument.AFTER
        )
        if document is None:
            return None
        return document["leave_balance"][leave_type]

    async def insert_leave(self, leave: dict) -> dict:
        document = {key: value for key, value in leave.items() if key != "id"}
        result = await self.leaves_collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _leave_from_document(document)

    async def get_leave(self, leave_id: str) -> Optional[dict]:
        object_id = _to_object_id(leave_id)
        if object_id is None:
            return None
        document = await self.leaves_collection.find_one({"_id": object_id})
        return _leave_from_document(document) if document else None

    async def find_leaves(self, owner_id: Optional[str] = None) -> List[dict]:
        query = {}
        if owner_id is not None:
            query["owner_id"] = owner_id

        leaves_cursor = self.leaves_collection.find(query).sort("requested_at", DESCENDING)
        return [_leave_from_document(document) async for document in leaves_cursor]

    async def compare_and_swap_status(self, leave_id: str, expected_status: str, fields: dict) -> Optional[dict]:
        object_id = _to_object_id(leave_id)
        if object_id is None:
            return None
        document = await self.leaves_collection.find_one_and_update(
            {"_id": object_id, "status": expected_status},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )
        return _leave_from_document(document) if document else None

    async def prepend_notification(self, account_id: str, notification: dict) -> bool:
        result = await self.users_collection.update_one(
            {"_id": account_id},
            {"$push": {"notifications": {"$each": [notification], "$position": 0}}}
        )
        return result.matched_count == 1

    async def list_notifications(self, account_id: str) -> Optional[List[dict]]:
        document = await self.users_collection.find_one({"_id": account_id}, {"notifications": 1})
        if document is None:
            return None
        return document.get("notifications", [])

    async def mark_notification_read(self, account_id: str, notification_id: str) -> bool:
        # matched, not modified: marking twice is still a success
        result = await self.users_collection.update_one(
            {"_id": account_id, "notifications.id": notification_id},
            {"$set": {"notifications.$.read": True}}
        )
        return result.matched_count == 1
