"""
Integration test fixtures
"""

import pytest
from fastapi.testclient import TestClient

from catalog_engine.activity import InMemoryActivityStore
from catalog_engine.api.dependencies import build_container, get_container
from catalog_engine.api.main import create_app
from catalog_engine.catalog import InMemoryCatalog
from catalog_engine.config import EngineConfig


@pytest.fixture
def container(sample_products):
    """Engine wired over the sample catalog with in-memory activity."""
    container = build_container(
        InMemoryCatalog(sample_products), InMemoryActivityStore(), EngineConfig()
    )
    yield container
    container.close()


@pytest.fixture
def app(container):
    app = create_app()
    app.dependency_overrides[get_container] = lambda: container
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create test API client."""
    return TestClient(app)


@pytest.fixture
def user_headers():
    return {"X-User-ID": "user-1"}
