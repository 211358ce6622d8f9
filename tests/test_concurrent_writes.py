import asyncio

import pytest

from artifact_catalog.dal import artifact_dal, category_dal
from artifact_catalog.db.mongo import ARTIFACTS, get_db
from artifact_catalog.domain import CatalogError, CategoryTree
from artifact_catalog.models import ArtifactCreate, CategoryCreate
from artifact_catalog.services import ArtifactService, CategoryService


def _yield_after(monkeypatch, module, name):
    """Make a DAL read give up the loop after returning, as network I/O does."""
    real = getattr(module, name)

    async def slow(*args, **kwargs):
        result = await real(*args, **kwargs)
        await asyncio.sleep(0)
        return result

    monkeypatch.setattr(module, name, slow)


@pytest.fixture
def slow_reads(monkeypatch):
    _yield_after(monkeypatch, category_dal, "list_children")
    _yield_after(monkeypatch, category_dal, "get_category")
    _yield_after(monkeypatch, artifact_dal, "list_artifact_ids")
    _yield_after(monkeypatch, artifact_dal, "allocate_id")


def _artifact_body(category_id) -> ArtifactCreate:
    return ArtifactCreate(
        title="Motor Recipes",
        description="Async MongoDB snippets",
        url="https://docs.example.org/motor",
        documentation_type="Sample Code",
        author="Ada Lovelace",
        current_version="1.0",
        category_id=category_id,
    )


def test_concurrent_creates_under_one_parent_get_dense_positions(slow_reads) -> None:
    async def scenario():
        svc = CategoryService(get_db())
        root = await svc.create(CategoryCreate(name="Root"))
        await asyncio.gather(
            *(svc.create(CategoryCreate(name=f"Child {i}", parent_category_id=root.id)) for i in range(4))
        )
        return await category_dal.list_children(svc.db, root.id)

    children = asyncio.run(scenario())

    assert sorted(c.position for c in children) == [0, 1, 2, 3]


def test_concurrent_root_creates_get_dense_positions(slow_reads) -> None:
    async def scenario():
        svc = CategoryService(get_db())
        await asyncio.gather(*(svc.create(CategoryCreate(name=f"Root {i}")) for i in range(5)))
        return await category_dal.list_children(svc.db, None)

    roots = asyncio.run(scenario())

    assert sorted(c.position for c in roots) == [0, 1, 2, 3, 4]


def test_concurrent_rearranges_and_deletes_keep_tree_consistent(slow_reads) -> None:
    async def scenario():
        svc = CategoryService(get_db())
        root = await svc.create(CategoryCreate(name="Root"))
        kids = [await svc.create(CategoryCreate(name=n, parent_category_id=root.id)) for n in "ABCDE"]
        await asyncio.gather(
            svc.rearrange(kids[4].id, 0),
            svc.delete(kids[1].id),
            svc.rearrange(kids[0].id, 2),
            svc.delete(kids[3].id),
        )
        return await category_dal.list_all(svc.db)

    tree = CategoryTree.from_categories(asyncio.run(scenario()))

    assert tree.check_invariants() == []
    assert len(tree.subcategories(tree.roots()[0].id)) == 3


def test_delete_racing_artifact_create_leaves_no_orphan(slow_reads) -> None:
    async def scenario():
        db = get_db()
        categories = CategoryService(db)
        root = await categories.create(CategoryCreate(name="Root"))
        target = await categories.create(CategoryCreate(name="Target", parent_category_id=root.id))
        results = await asyncio.gather(
            categories.delete(target.id),
            ArtifactService(db).create(_artifact_body(target.id)),
            return_exceptions=True,
        )
        still_there = await category_dal.get_category(db, target.id) is not None
        referencing = await db[ARTIFACTS].count_documents({"category_id": target.id})
        return results, still_there, referencing

    results, still_there, referencing = asyncio.run(scenario())

    assert all(not isinstance(r, Exception) or isinstance(r, CatalogError) for r in results)
    assert still_there or referencing == 0
    # Exactly one of the two writes wins.
    assert sum(isinstance(r, CatalogError) for r in results) == 1


def test_artifact_create_before_delete_blocks_the_delete(slow_reads) -> None:
    async def scenario():
        db = get_db()
        categories = CategoryService(db)
        root = await categories.create(CategoryCreate(name="Root"))
        target = await categories.create(CategoryCreate(name="Target", parent_category_id=root.id))
        results = await asyncio.gather(
            ArtifactService(db).create(_artifact_body(target.id)),
            categories.delete(target.id),
            return_exceptions=True,
        )
        return results, await category_dal.get_category(db, target.id)

    (created, deleted), category = asyncio.run(scenario())

    assert created.category_id == category.id
    assert type(deleted).__name__ == "InvalidOperation"
