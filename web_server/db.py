import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from config import MONGODB_DB, MONGODB_URL

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient | None = None
db: AsyncIOMotorDatabase | None = None

MATCH_CACHE_COLLECTION = "matching_scores"


async def connect_db() -> AsyncIOMotorDatabase:
    global client, db
    client = AsyncIOMotorClient(MONGODB_URL, tz_aware=True)
    db = client[MONGODB_DB]

    # One cached row per (student, mentor); upserts rely on this key
    cache = db[MATCH_CACHE_COLLECTION]
    await cache.create_index(
        [("student_id", ASCENDING), ("mentor_id", ASCENDING)],
        unique=True,
        name="student_mentor_unique",
    )
    await cache.create_index("expires_at", name="expires_at")

    logger.info("Connected to MongoDB database %s", MONGODB_DB)
    return db


async def close_db() -> None:
    global client
    if client:
        client.close()


def get_db() -> AsyncIOMotorDatabase:
    assert db is not None, "Database not connected. Call connect_db() first."
    return db
