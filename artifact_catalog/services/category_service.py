from __future__ import annotations

import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..dal import artifact_dal, category_dal
from ..domain import CategoryNotFound, CategoryTree, InvalidArgument
from ..events import Service, emit
from ..models import Category, CategoryCreate, CategoryOut
from .locks import structure_lock

logger = logging.getLogger("artifact_catalog.services.category")


class CategoryService:
    """
    Loads the slice of the tree an operation touches, runs it through
    `CategoryTree`, then persists exactly the categories the tree marked dirty.
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.db = db

    # ─────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────
    async def _require(self, category_id: int) -> Category:
        category = await category_dal.get_category(self.db, category_id)
        if category is None:
            raise CategoryNotFound(category_id)
        return category

    async def _family(self, category: Category) -> List[Optional[Category]]:
        """The category's parent (if any) and its complete sibling set."""
        parent = None
        if category.parent_category_id is not None:
            parent = await category_dal.get_category(self.db, category.parent_category_id)
        siblings = await category_dal.list_children(self.db, category.parent_category_id)
        return [parent, *siblings]

    async def _attach_artifacts(self, tree: CategoryTree, category_ids: Optional[List[int]] = None) -> None:
        grouped = await artifact_dal.artifact_ids_by_category(self.db, category_ids)
        for category_id, artifact_ids in grouped.items():
            if category_id in tree:
                tree.get(category_id).artifact_ids = artifact_ids

    def _render(self, tree: CategoryTree, category: Category) -> CategoryOut:
        return CategoryOut(
            id=category.id,
            name=category.name,
            parent_category_id=category.parent_category_id,
            position=category.position,
            path=category.path,
            level=tree.level(category.id),
            artifacts_count=len(category.artifact_ids),
            is_empty=tree.is_empty(category.id),
            subcategories=[self._render(tree, c) for c in tree.subcategories(category.id)],
        )

    # ─────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────
    async def list_tree(self) -> List[CategoryOut]:
        tree = CategoryTree.from_categories(await category_dal.list_all(self.db))
        await self._attach_artifacts(tree)
        return [self._render(tree, root) for root in tree.roots()]

    async def get_subtree(self, category_id: int) -> CategoryOut:
        category = await self._require(category_id)
        descendants = await category_dal.list_descendants(self.db, category.path) if category.path else []
        tree = CategoryTree.from_categories([category, *descendants])
        await self._attach_artifacts(tree, [category.id, *(d.id for d in descendants)])
        return self._render(tree, tree.get(category_id))

    # ─────────────────────────────────────────────────────────────
    # Writes (each holds the structure lock from first read to last write)
    # ─────────────────────────────────────────────────────────────
    async def create(self, payload: CategoryCreate) -> Category:
        if not payload.name.strip():
            raise InvalidArgument("Category name cannot be empty")

        async with structure_lock():
            parent = None
            if payload.parent_category_id is not None:
                parent = await category_dal.get_category(self.db, payload.parent_category_id)
                if parent is None:
                    raise InvalidArgument("Parent category not found")
                siblings = await category_dal.list_children(self.db, parent.id)
                tree = CategoryTree.from_categories([parent, *siblings])
            else:
                tree = CategoryTree.from_categories(await category_dal.list_children(self.db, None))

            category = Category(id=await category_dal.allocate_id(self.db), name=payload.name)
            if parent is not None:
                tree.add_subcategory(parent.id, category)
            else:
                tree.add_root(category)

            await category_dal.insert_category(self.db, category)
            others = [c for c in tree.pop_dirty() if c.id != category.id]
            if others:
                await category_dal.save_categories(self.db, others)

        logger.info("Category %s created at path %s (position %d)", category.id, category.path, category.position)
        await emit(Service.CATEGORY, "created", category.model_dump(mode="json"))
        return category

    async def rename(self, category_id: int, name: Optional[str]) -> Category:
        async with structure_lock():
            category = await self._require(category_id)
            parent = None
            if category.parent_category_id is not None:
                parent = await category_dal.get_category(self.db, category.parent_category_id)
            descendants = await category_dal.list_descendants(self.db, category.path) if category.path else []

            tree = CategoryTree.from_categories([parent, category, *descendants])
            tree.modify_category(category_id, name)
            changed = tree.pop_dirty()
            await category_dal.save_categories(self.db, changed)

        logger.info("Category %s renamed; %d categories refreshed", category_id, len(changed))
        await emit(Service.CATEGORY, "renamed", {"id": category_id, "name": category.name, "path": category.path})
        return category

    async def rearrange(self, category_id: int, new_position: int) -> List[Category]:
        async with structure_lock():
            category = await self._require(category_id)
            if category.parent_category_id is None:
                tree = CategoryTree.from_categories([category])
            else:
                tree = CategoryTree.from_categories(await self._family(category))

            ordered = tree.rearrange(category_id, new_position)
            changed = tree.pop_dirty()
            await category_dal.save_categories(self.db, changed)

        logger.info("Category %s moved to position %d (%d siblings updated)", category_id, new_position, len(changed))
        await emit(
            Service.CATEGORY,
            "rearranged",
            {
                "id": category_id,
                "parent_category_id": category.parent_category_id,
                "new_position": new_position,
                "order": [c.id for c in ordered],
            },
        )
        return ordered

    async def delete(self, category_id: int) -> Category:
        async with structure_lock():
            category = await self._require(category_id)
            children = await category_dal.list_children(self.db, category_id)
            tree = CategoryTree.from_categories([*(await self._family(category)), *children])
            tree.get(category_id).artifact_ids = await artifact_dal.list_artifact_ids(self.db, category_id)

            removed = tree.delete(category_id)
            # Reindex siblings before the row goes away.
            await category_dal.save_categories(self.db, tree.pop_dirty())
            await category_dal.delete_category(self.db, category_id)

        logger.info("Category %s deleted", category_id)
        await emit(Service.CATEGORY, "deleted", {"id": category_id, "parent_category_id": removed.parent_category_id})
        return removed
