"""
Tests for settings-driven engine wiring and the latency tracker.
"""

import json

import pytest
from pydantic import ValidationError

from catalog_engine.activity import InMemoryActivityStore, SqlActivityStore
from catalog_engine.api.config import APISettings
from catalog_engine.api.dependencies import build_container_from_settings, load_seed_products
from catalog_engine.api.middleware.timing import LatencyTracker
from catalog_engine.catalog import InMemoryCatalog, SqlProductCatalog
from catalog_engine.models import SearchQuery


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "s1",
                    "name": "iPad mini",
                    "category": "ipad",
                    "price": 499,
                    "features": ["A15"],
                    "numReviews": 30,
                    "rating": 4.4,
                    "stockCount": 4,
                },
                {
                    "id": "s2",
                    "name": "iPad Pro",
                    "category": "ipad",
                    "price": 999.99,
                    "features": ["M4", "A15"],
                    "numReviews": 12,
                    "rating": 4.8,
                    "stockCount": 0,
                },
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_load_seed_products(seed_file):
    products = load_seed_products(str(seed_file))

    assert [p.id for p in products] == ["s1", "s2"]
    assert products[0].num_reviews == 30


def test_memory_backend(seed_file):
    container = build_container_from_settings(APISettings(storage_backend="memory", seed_file=str(seed_file)))
    try:
        assert isinstance(container.catalog, InMemoryCatalog)
        assert isinstance(container.activity_store, InMemoryActivityStore)
        assert container.cache is None

        result = container.search_service.search(SearchQuery(query="ipad"))
        assert [p.id for p in result.products] == ["s1"]
    finally:
        container.close()


def test_sql_backend(seed_file, tmp_path):
    settings = APISettings(
        storage_backend="sql",
        database_url=f"sqlite:///{tmp_path / 'catalog.db'}",
        seed_file=str(seed_file),
    )
    container = build_container_from_settings(settings)
    try:
        assert isinstance(container.catalog, SqlProductCatalog)
        assert isinstance(container.activity_store, SqlActivityStore)

        result = container.search_service.search(SearchQuery(include_out_of_stock=True, sort="price_desc"))
        assert [p.id for p in result.products] == ["s2", "s1"]

        container.tracker.add_activity("u1", {"activityType": "view_product", "productId": "s2"})
        assert [p.id for p in container.recommendations.recommend("u1")] == ["s2"]
        assert [s.id for s in container.search_service.similar_products("s1")] == ["s2"]
    finally:
        container.close()


def test_unknown_storage_backend():
    with pytest.raises(ValidationError):
        APISettings(storage_backend="mongo")


def test_cors_origins_from_comma_list():
    settings = APISettings(cors_origins="http://a.test, http://b.test")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]


class TestLatencyTracker:
    def test_empty(self):
        assert LatencyTracker().get_stats()["count"] == 0

    def test_percentiles(self):
        tracker = LatencyTracker()
        for value in range(1, 101):
            tracker.record(float(value))

        stats = tracker.get_stats()

        assert stats["count"] == 100
        assert stats["p50"] == 51.0
        assert stats["p99"] == 100.0
        assert stats["max"] == 100.0
        assert stats["mean"] == 50.5

    def test_window_keeps_latest(self):
        tracker = LatencyTracker(window_size=2)
        for value in (1.0, 2.0, 3.0):
            tracker.record(value)

        assert tracker.get_stats()["max"] == 3.0
        assert tracker.get_stats()["count"] == 2
