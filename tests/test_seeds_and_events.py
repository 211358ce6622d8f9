import asyncio

from artifact_catalog.config import settings
from artifact_catalog.dal import category_dal
from artifact_catalog.db.mongo import get_db
from artifact_catalog.domain import CategoryTree
from artifact_catalog.events import Service, emit, rk
from artifact_catalog.events import rabbit
from artifact_catalog.seeds import run_all_seeds
from artifact_catalog.seeds.seed_categories import STARTER_TREE


def test_seed_builds_starter_tree_once() -> None:
    db = get_db()

    first = asyncio.run(run_all_seeds(db))
    second = asyncio.run(run_all_seeds(db))

    expected = sum(1 + len(children) for _, children in STARTER_TREE)
    assert first == {"categories": {"existing": 0, "seeded": expected}}
    assert second == {"categories": {"existing": expected, "seeded": 0}}

    tree = CategoryTree.from_categories(asyncio.run(category_dal.list_all(db)))
    assert [c.name for c in tree.roots()] == [name for name, _ in STARTER_TREE]
    assert tree.check_invariants() == []


def test_seed_can_be_disabled(monkeypatch) -> None:
    monkeypatch.setattr(settings, "seed_categories", False)
    db = get_db()

    assert asyncio.run(run_all_seeds(db)) == {"categories": None}
    assert asyncio.run(category_dal.count_categories(db)) == 0


def test_emit_is_a_noop_when_disabled() -> None:
    assert asyncio.run(emit(Service.CATEGORY, "created", {"id": 1})) is False


def test_emit_swallows_broker_failures(monkeypatch) -> None:
    async def broken_publish(**kwargs):
        raise ConnectionError("broker down")

    monkeypatch.setattr(settings, "events_enabled", True)
    monkeypatch.setattr(rabbit.get_bus(), "publish", broken_publish)

    assert asyncio.run(emit(Service.ARTIFACT, "deleted", {"id": 9})) is False


def test_emit_publishes_with_routing_key(monkeypatch) -> None:
    sent = []

    async def fake_publish(**kwargs):
        sent.append(kwargs)

    monkeypatch.setattr(settings, "events_enabled", True)
    monkeypatch.setattr(rabbit.get_bus(), "publish", fake_publish)

    assert asyncio.run(emit(Service.CATEGORY, "rearranged", {"id": 4})) is True
    assert sent == [{"service": Service.CATEGORY, "event": "rearranged", "payload": {"id": 4}}]
    assert rk("catalog", Service.CATEGORY, "rearranged") == "catalog.category.rearranged.v1"
