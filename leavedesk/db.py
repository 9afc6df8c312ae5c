import logging
from motor.motor_asyncio import AsyncIOMotorClient
from leavedesk.config import Settings
from leavedesk.stores.base import RecordStore
from leavedesk.stores.memory_store import MemoryRecordStore
from leavedesk.stores.mongo_store import MongoRecordStore

logger = logging.getLogger(__name__)


def create_record_store(settings: Settings) -> RecordStore:
    if settings.STORE_BACKEND == "memory":
        logger.info("Using in-memory record store")
        return MemoryRecordStore()

    if settings.STORE_BACKEND != "mongo":
        raise ValueError(f"Unknown STORE_BACKEND {settings.STORE_BACKEND!r}")

    client = AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)
    db = client[settings.DATABASE_NAME]
    logger.info("Using MongoDB record store (database %s)", settings.DATABASE_NAME)
    return MongoRecordStore(db)
