# artifact_catalog/dal/category_dal.py
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..db.mongo import CATEGORIES, next_sequence
from ..models.category import PATH_SEPARATOR, Category


async def allocate_id(db: AsyncIOMotorDatabase) -> int:
    return await next_sequence(db, CATEGORIES)


async def get_category(db: AsyncIOMotorDatabase, category_id: int) -> Optional[Category]:
    d = await db[CATEGORIES].find_one({"_id": category_id})
    return Category.model_validate(d) if d else None


async def list_children(db: AsyncIOMotorDatabase, parent_id: Optional[int]) -> List[Category]:
    """Direct children of `parent_id` ordered by position; `None` lists the roots."""
    cur = db[CATEGORIES].find({"parent_category_id": parent_id}).sort(
        [("position", ASCENDING), ("_id", ASCENDING)]
    )
    return [Category.model_validate(d) async for d in cur]


async def list_descendants(db: AsyncIOMotorDatabase, path: str) -> List[Category]:
    """Everything below the category whose materialized path is `path`."""
    prefix = "^" + re.escape(path + PATH_SEPARATOR)
    cur = db[CATEGORIES].find({"path": {"$regex": prefix}})
    return [Category.model_validate(d) async for d in cur]


async def list_all(db: AsyncIOMotorDatabase) -> List[Category]:
    cur = db[CATEGORIES].find({})
    return [Category.model_validate(d) async for d in cur]


async def count_categories(db: AsyncIOMotorDatabase) -> int:
    return await db[CATEGORIES].count_documents({})


async def insert_category(db: AsyncIOMotorDatabase, category: Category) -> Category:
    now = datetime.now(timezone.utc)
    category.created_at = now
    category.updated_at = now
    await db[CATEGORIES].insert_one(category.model_dump(by_alias=True))
    return category


async def save_categories(db: AsyncIOMotorDatabase, categories: Iterable[Category]) -> int:
    """Persist the structural fields of already stored categories."""
    now = datetime.now(timezone.utc)
    saved = 0
    for c in categories:
        c.updated_at = now
        await db[CATEGORIES].update_one(
            {"_id": c.id},
            {
                "$set": {
                    "name": c.name,
                    "parent_category_id": c.parent_category_id,
                    "position": c.position,
                    "path": c.path,
                    "updated_at": now,
                }
            },
        )
        saved += 1
    return saved


async def delete_category(db: AsyncIOMotorDatabase, category_id: int) -> bool:
    res = await db[CATEGORIES].delete_one({"_id": category_id})
    return res.deleted_count == 1
