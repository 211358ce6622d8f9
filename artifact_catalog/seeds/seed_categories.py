from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..dal import category_dal
from ..models import CategoryCreate
from ..services import CategoryService

log = logging.getLogger("artifact_catalog.seeds.categories")

# Root name -> child names, in display order.
STARTER_TREE: List[Tuple[str, List[str]]] = [
    ("Libraries", ["Python", "JavaScript", "Java", ".NET"]),
    ("Tools", ["Build & CI", "Testing", "Debugging"]),
    ("Documentation", ["API References", "Guides & Tutorials"]),
    ("Frameworks", ["Web", "Data & ML"]),
]


async def seed_categories(db: AsyncIOMotorDatabase) -> Dict[str, int]:
    """
    Create the starter tree on an empty catalog. Categories go through
    CategoryService so positions and paths come from the tree core.
    """
    existing = await category_dal.count_categories(db)
    if existing:
        log.info("[catalog.seeds.categories] Skipped: %d categories already present", existing)
        return {"existing": existing, "seeded": 0}

    svc = CategoryService(db)
    seeded = 0
    for root_name, children in STARTER_TREE:
        root = await svc.create(CategoryCreate(name=root_name))
        seeded += 1
        for child_name in children:
            await svc.create(CategoryCreate(name=child_name, parent_category_id=root.id))
            seeded += 1

    log.info("[catalog.seeds.categories] Seeded %d categories", seeded)
    return {"existing": 0, "seeded": seeded}
