# artifact_catalog/dal/artifact_dal.py
from __future__ import annotations

import re
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from ..db.mongo import ARTIFACTS, next_sequence
from ..models.artifact import ArtifactSearchQuery, ArtifactVersion, SoftwareDevArtifact, SortField

VERSIONS_SEQUENCE = "artifact_versions"

# Fields an update may touch; documentation type, author and category stay as created.
_UPDATABLE = ("title", "description", "url", "programming_language", "framework", "license_type")


async def allocate_id(db: AsyncIOMotorDatabase) -> int:
    return await next_sequence(db, ARTIFACTS)


async def allocate_version_id(db: AsyncIOMotorDatabase) -> int:
    return await next_sequence(db, VERSIONS_SEQUENCE)


async def get_artifact(db: AsyncIOMotorDatabase, artifact_id: int) -> Optional[SoftwareDevArtifact]:
    d = await db[ARTIFACTS].find_one({"_id": artifact_id})
    return SoftwareDevArtifact.model_validate(d) if d else None


async def insert_artifact(db: AsyncIOMotorDatabase, artifact: SoftwareDevArtifact) -> SoftwareDevArtifact:
    await db[ARTIFACTS].insert_one(artifact.model_dump(by_alias=True))
    return artifact


async def update_artifact(db: AsyncIOMotorDatabase, artifact: SoftwareDevArtifact) -> Optional[SoftwareDevArtifact]:
    updates = {f: getattr(artifact, f) for f in _UPDATABLE}
    res = await db[ARTIFACTS].find_one_and_update(
        {"_id": artifact.id},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    return SoftwareDevArtifact.model_validate(res) if res else None


async def delete_artifact(db: AsyncIOMotorDatabase, artifact_id: int) -> bool:
    # Versions are embedded, so they go with the artifact.
    res = await db[ARTIFACTS].delete_one({"_id": artifact_id})
    return res.deleted_count == 1


async def push_version(
    db: AsyncIOMotorDatabase,
    artifact_id: int,
    version: ArtifactVersion,
    current_version: str,
) -> bool:
    res = await db[ARTIFACTS].update_one(
        {"_id": artifact_id},
        {
            "$push": {"versions": version.model_dump()},
            "$set": {"current_version": current_version},
        },
    )
    return res.matched_count == 1


async def list_artifact_ids(db: AsyncIOMotorDatabase, category_id: int) -> List[int]:
    cur = db[ARTIFACTS].find({"category_id": category_id}, {"_id": 1})
    return [d["_id"] async for d in cur]


async def artifact_ids_by_category(
    db: AsyncIOMotorDatabase, category_ids: Optional[Iterable[int]] = None
) -> Dict[int, List[int]]:
    query: Dict[str, Any] = {}
    if category_ids is not None:
        query = {"category_id": {"$in": list(category_ids)}}
    grouped: Dict[int, List[int]] = defaultdict(list)
    cur = db[ARTIFACTS].find(query, {"category_id": 1}).sort("_id", ASCENDING)
    async for d in cur:
        grouped[d.get("category_id")].append(d["_id"])
    return dict(grouped)


# ─────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────
def build_filter(query: ArtifactSearchQuery, category_ids: Optional[List[int]] = None) -> Dict[str, Any]:
    """
    Translate a search query into a Mongo filter. `category_ids` overrides
    `query.category_ids` once the caller has expanded subcategories.
    """
    conds: List[Dict[str, Any]] = []
    if query.search_term:
        term = {"$regex": re.escape(query.search_term), "$options": "i"}
        conds.append({"$or": [{"title": term}, {"description": term}]})
    if query.programming_language:
        conds.append({"programming_language": query.programming_language})
    if query.framework:
        conds.append({"framework": query.framework})
    if query.license_type:
        conds.append({"license_type": query.license_type})

    ids = category_ids if category_ids is not None else query.category_ids
    if ids:
        conds.append({"category_id": {"$in": list(ids)}})

    if not conds:
        return {}
    if len(conds) == 1:
        return conds[0]
    return {"$and": conds}


def build_sort(query: ArtifactSearchQuery) -> List[tuple]:
    direction = DESCENDING if query.sort_descending else ASCENDING
    field = (query.sort_field or "").lower()
    if field in (SortField.title.value, SortField.created.value, SortField.author.value):
        return [(field, direction), ("_id", ASCENDING)]
    # Unknown or missing sort fields fall back to id order.
    return [("_id", ASCENDING)]


async def search_artifacts(
    db: AsyncIOMotorDatabase,
    query: ArtifactSearchQuery,
    *,
    category_ids: Optional[List[int]] = None,
) -> List[SoftwareDevArtifact]:
    cur = (
        db[ARTIFACTS]
        .find(build_filter(query, category_ids))
        .sort(build_sort(query))
        .skip(max(0, query.offset))
        .limit(min(query.limit, 200))
    )
    return [SoftwareDevArtifact.model_validate(d) async for d in cur]
