from __future__ import annotations

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from ..config import settings

CATEGORIES = "categories"
ARTIFACTS = "artifacts"
COUNTERS = "counters"

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    """
    Lazily create (and reuse) the Motor client.
    """
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.mongo_uri)
    return _client


def get_db() -> AsyncIOMotorDatabase:
    """
    Return the database handle using configured DB name.
    """
    return get_client()[settings.mongo_db]


async def next_sequence(db: AsyncIOMotorDatabase, name: str) -> int:
    """Atomically allocate the next integer id for `name`."""
    doc = await db[COUNTERS].find_one_and_update(
        {"_id": name},
        {"$inc": {"value": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(doc["value"])


async def init_indexes() -> None:
    """
    Create indexes for the catalog collections.
    Call this from FastAPI startup.
    """
    db = get_db()

    # categories: sibling ordering and path-prefix lookups
    await db[CATEGORIES].create_index([("parent_category_id", ASCENDING), ("position", ASCENDING)])
    await db[CATEGORIES].create_index("path")

    # artifacts: filters used by search
    await db[ARTIFACTS].create_index("category_id")
    await db[ARTIFACTS].create_index("programming_language")
    await db[ARTIFACTS].create_index("framework")
    await db[ARTIFACTS].create_index("license_type")
    await db[ARTIFACTS].create_index("title")
    await db[ARTIFACTS].create_index("created")
