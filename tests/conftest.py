import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from artifact_catalog.config import settings
from artifact_catalog.db import mongo
from artifact_catalog.main import app


@pytest.fixture(autouse=True)
def _offline(monkeypatch):
    # No broker and a fresh in-memory database per test.
    monkeypatch.setattr(settings, "events_enabled", False)
    monkeypatch.setattr(mongo, "_client", AsyncMongoMockClient())


@pytest.fixture
def client():
    # Lifespan is skipped on purpose: no indexes, seeds or bus in tests.
    return TestClient(app)


@pytest.fixture
def make_category(client):
    def _make(name, parent_category_id=None):
        res = client.post("/api/categories", json={"name": name, "parent_category_id": parent_category_id})
        assert res.status_code == 201, res.text
        return res.json()

    return _make


@pytest.fixture
def make_artifact(client):
    def _make(category_id, **overrides):
        body = {
            "title": "Requests Guide",
            "description": "How to use the HTTP client",
            "url": "https://docs.example.org/requests",
            "documentation_type": "User Guide",
            "author": "Ada Lovelace",
            "current_version": "1.0",
            "programming_language": "Python",
            "framework": "None",
            "license_type": "MIT",
            "category_id": category_id,
        }
        body.update(overrides)
        res = client.post("/api/artifacts", json=body)
        assert res.status_code == 201, res.text
        return res.json()

    return _make
