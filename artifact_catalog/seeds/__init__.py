from __future__ import annotations

import logging
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config import settings
from .seed_categories import seed_categories

log = logging.getLogger("artifact_catalog.seeds")


async def run_all_seeds(db: AsyncIOMotorDatabase) -> Dict[str, Any]:
    """
    Run all seeders in a safe, idempotent manner.
    Controlled by env flags:

      SEED_CATEGORIES=1   -> seed the starter category tree (default: 1)
    """
    if not settings.seed_categories:
        log.info("[catalog.seeds.categories] Skipped via env")
        return {"categories": None}
    return {"categories": await seed_categories(db)}
