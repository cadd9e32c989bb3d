"""
Pytest configuration and shared fixtures
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root and tests dir to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from catalog_engine.activity import (
    ActivityTracker,
    InMemoryActivityStore,
    RecommendationEngine,
)
from catalog_engine.catalog import InMemoryCatalog
from catalog_engine.config import ActivityConfig, EngineConfig, SearchConfig, reset_config
from catalog_engine.models import ProductRecord
from catalog_engine.search import CandidateRetriever, SearchService, TrendingSelector

from helpers import make_product


@pytest.fixture(autouse=True)
def _reset_engine_config():
    """Keep the global engine config from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_products() -> List[ProductRecord]:
    """Small catalog spanning every category."""
    return [
        make_product(
            "p01", "iPhone 15 Pro", "iphone", "999",
            colors=["Black", "Blue Titanium", "White"],
            features=["5G", "A17 Pro", "USB-C"],
            rating=4.8, num_reviews=120, stock_count=10, created_days=30,
            description="Titanium design with the A17 Pro chip",
        ),
        make_product(
            "p02", "iPhone 15", "iphone", "799",
            colors=["Black", "Pink"],
            features=["5G", "A16", "USB-C"],
            rating=4.6, num_reviews=80, stock_count=5, created_days=29,
        ),
        make_product(
            "p03", "iPhone SE", "iphone", "429",
            colors=["Black", "Red"],
            features=["5G", "A15", "Touch ID"],
            rating=4.2, num_reviews=40, stock_count=0, created_days=1,
        ),
        make_product(
            "p04", "iPad Air", "ipad", "599",
            colors=["Blue", "Purple"],
            features=["M1", "USB-C", "Touch ID"],
            rating=4.7, num_reviews=60, stock_count=7, created_days=10,
        ),
        make_product(
            "p05", "MacBook Air", "mac", "1099",
            colors=["Midnight", "Silver"],
            features=["M2", "Touch ID"],
            rating=4.9, num_reviews=200, stock_count=3, created_days=5,
        ),
        make_product(
            "p06", "Apple Watch Series 9", "watch", "399",
            colors=["Midnight", "Pink"],
            features=["S9", "Always-On"],
            rating=4.5, num_reviews=3, stock_count=12, created_days=20,
        ),
        make_product(
            "p07", "AirPods Pro", "airpods", "249",
            colors=["White"],
            features=["ANC", "USB-C"],
            rating=4.7, num_reviews=150, stock_count=20, created_days=15,
        ),
        make_product(
            "p08", "MagSafe Charger", "accessories", "39",
            colors=["White"],
            features=["MagSafe"],
            rating=3.9, num_reviews=25, stock_count=50, created_days=2,
            images=[],
        ),
    ]


@pytest.fixture
def catalog(sample_products) -> InMemoryCatalog:
    return InMemoryCatalog(sample_products)


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(search=SearchConfig(), activity=ActivityConfig())


@pytest.fixture
def search_service(catalog, engine_config):
    service = SearchService(catalog, engine_config.search)
    yield service
    service.close()


@pytest.fixture
def retriever(catalog) -> CandidateRetriever:
    return CandidateRetriever(catalog)


@pytest.fixture
def trending_selector(retriever, engine_config) -> TrendingSelector:
    return TrendingSelector(retriever, engine_config.search)


@pytest.fixture
def activity_store(engine_config) -> InMemoryActivityStore:
    return InMemoryActivityStore(max_events=engine_config.activity.max_events)


@pytest.fixture
def tracker(catalog, activity_store, engine_config) -> ActivityTracker:
    return ActivityTracker(catalog, activity_store, engine_config.activity)


@pytest.fixture
def recommendation_engine(catalog, activity_store, trending_selector, engine_config):
    return RecommendationEngine(catalog, activity_store, trending_selector, engine_config.activity)
