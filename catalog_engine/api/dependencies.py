"""
Dependency Injection
Engine wiring and FastAPI dependencies.
"""

import json
import logging
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, Header

from ..activity import (
    ActivityStore,
    ActivityTracker,
    InMemoryActivityStore,
    RecommendationEngine,
    SqlActivityStore,
)
from ..caching import ResultCache
from ..catalog import InMemoryCatalog, ProductCatalog, SqlProductCatalog
from ..config import EngineConfig, get_engine_config
from ..db import Base, create_db_engine, create_session_factory
from ..errors import ValidationError
from ..models import ProductRecord
from ..search import SearchService
from .config import APISettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class EngineContainer:
    """Long-lived engine components shared by all requests."""

    catalog: ProductCatalog
    activity_store: ActivityStore
    search_service: SearchService
    tracker: ActivityTracker
    recommendations: RecommendationEngine
    cache: Optional[ResultCache] = None

    def close(self) -> None:
        self.search_service.close()


def load_seed_products(path: str) -> List[ProductRecord]:
    """Read a JSON array of products (camelCase or snake_case keys)."""
    with Path(path).open(encoding="utf-8") as f:
        raw = json.load(f)
    return [ProductRecord.model_validate(item) for item in raw]


def build_container(
    catalog: ProductCatalog,
    activity_store: ActivityStore,
    config: Optional[EngineConfig] = None,
    cache: Optional[ResultCache] = None,
) -> EngineContainer:
    """
    Wire engine components around a catalog and activity store.

    Args:
        catalog: Product catalog collaborator
        activity_store: Activity log persistence
        config: Engine configuration (default: global)
        cache: Optional result cache

    Returns:
        EngineContainer
    """
    config = config or get_engine_config()

    search_service = SearchService(catalog, config.search)
    tracker = ActivityTracker(catalog, activity_store, config.activity)
    recommendations = RecommendationEngine(
        catalog, activity_store, search_service.trending_selector, config.activity
    )

    return EngineContainer(
        catalog=catalog,
        activity_store=activity_store,
        search_service=search_service,
        tracker=tracker,
        recommendations=recommendations,
        cache=cache,
    )


def build_container_from_settings(settings: APISettings) -> EngineContainer:
    """Build the container described by API settings."""
    config = get_engine_config()
    seed = load_seed_products(settings.seed_file) if settings.seed_file else []

    if settings.storage_backend == "sql":
        engine = create_db_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        session_factory = create_session_factory(engine)

        catalog = SqlProductCatalog(session_factory)
        if seed:
            catalog.add_products(seed)
        store = SqlActivityStore(session_factory, max_events=config.activity.max_events)
    else:
        catalog = InMemoryCatalog(seed)
        store = InMemoryActivityStore(max_events=config.activity.max_events)

    cache = None
    if settings.enable_cache:
        cache = ResultCache(config.cache)

    logger.info(
        f"Engine wired: storage={settings.storage_backend}, seeded={len(seed)}, "
        f"cache={'on' if cache else 'off'}"
    )

    return build_container(catalog, store, config, cache)


# Global container
_container: Optional[EngineContainer] = None
_container_lock = threading.Lock()


def get_container() -> EngineContainer:
    """Get the engine container (singleton, built on first use)."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = build_container_from_settings(get_settings())
    return _container


def reset_container() -> None:
    """Close and drop the engine container (useful for testing)."""
    global _container
    with _container_lock:
        if _container is not None:
            _container.close()
        _container = None


def get_search_service(container: EngineContainer = Depends(get_container)) -> SearchService:
    return container.search_service


def get_activity_tracker(container: EngineContainer = Depends(get_container)) -> ActivityTracker:
    return container.tracker


def get_recommendation_engine(
    container: EngineContainer = Depends(get_container),
) -> RecommendationEngine:
    return container.recommendations


def get_result_cache(container: EngineContainer = Depends(get_container)) -> Optional[ResultCache]:
    return container.cache


def get_optional_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """
    Get caller's user ID from the X-User-ID header, if any.

    Use as FastAPI dependency:
        @app.get("/endpoint")
        def endpoint(user_id: Optional[str] = Depends(get_optional_user_id)):
            ...
    """
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


def get_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    """
    Get caller's user ID, failing when the header is missing.

    Raises:
        ValidationError: X-User-ID header absent or blank
    """
    if not user_id:
        raise ValidationError("X-User-ID header is required")
    return user_id


def get_request_id(x_request_id: Optional[str] = Header(None)) -> str:
    """Get or generate request ID for tracing."""
    return x_request_id or str(uuid.uuid4())
