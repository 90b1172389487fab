import logging
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

logger = logging.getLogger(__name__)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the per-store unique keys the repositories query and upsert on. Idempotent."""
    await db["products"].create_index([("store_id", ASCENDING), ("product_id", ASCENDING)], unique=True)
    await db["orders"].create_index([("store_id", ASCENDING), ("order_id", ASCENDING)], unique=True)
    await db["categories"].create_index([("store_id", ASCENDING), ("category_id", ASCENDING)], unique=True)
    await db["stores"].create_index([("store_id", ASCENDING)], unique=True)
    logger.info("mongo indexes ensured db=%s", db.name)
