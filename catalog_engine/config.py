"""
Engine Configuration
Centralized configuration for search, faceting, activity tracking and caching.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SearchConfig:
    """Search pipeline configuration."""

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Price facet bucket boundaries (lower bounds, last one is exclusive upper bound)
    price_facet_boundaries: List[int] = field(
        default_factory=lambda: [0, 100, 500, 1000, 2000, 5000]
    )
    price_facet_default: str = "Other"

    # Relevance field weights
    name_weight: float = 3.0
    category_weight: float = 2.0
    description_weight: float = 1.0

    # Autocomplete
    autocomplete_min_length: int = 2
    autocomplete_default_limit: int = 5

    # Best-effort endpoints
    similar_default_limit: int = 4
    trending_default_limit: int = 8
    trending_min_reviews: int = 5  # Minimum signal to avoid single-review noise

    # Request budget
    request_timeout_seconds: float = 5.0
    worker_threads: int = 4  # Faceting pool shared by all requests

    def __post_init__(self):
        boundaries = self.price_facet_boundaries
        if len(boundaries) < 2 or any(a >= b for a, b in zip(boundaries, boundaries[1:])):
            raise ValueError(f"Price facet boundaries must be strictly increasing, got {boundaries}")


@dataclass
class ActivityConfig:
    """Activity log and personalization configuration."""

    max_events: int = 500  # FIFO eviction beyond this
    preference_window: int = 100  # Most recent events used for preferences
    favorite_categories_top_n: int = 3

    recommendation_default_limit: int = 6

    # Activity report
    report_recent_events: int = 50
    report_recent_searches: int = 10


@dataclass
class CacheConfig:
    """Redis result cache configuration (trending / similar responses)."""

    enabled: bool = False
    redis_host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    redis_port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    redis_password: Optional[str] = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    redis_db: int = 2
    trending_ttl_seconds: int = 5 * 60
    similar_ttl_seconds: int = 60 * 60
    key_prefix: str = "catalog"
    reconnect_backoff_seconds: float = 30.0  # Wait after a failed connect before retrying


@dataclass
class EngineConfig:
    """Top-level configuration combining all sub-configs."""

    search: SearchConfig = field(default_factory=SearchConfig)
    activity: ActivityConfig = field(default_factory=ActivityConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        config = cls()

        if page_size := os.getenv("SEARCH_DEFAULT_PAGE_SIZE"):
            config.search.default_page_size = int(page_size)

        if timeout := os.getenv("SEARCH_TIMEOUT_SECONDS"):
            config.search.request_timeout_seconds = float(timeout)

        if max_events := os.getenv("ACTIVITY_MAX_EVENTS"):
            config.activity.max_events = int(max_events)

        if window := os.getenv("ACTIVITY_PREFERENCE_WINDOW"):
            config.activity.preference_window = int(window)

        if os.getenv("CATALOG_CACHE_ENABLED", "").lower() in ("1", "true", "yes"):
            config.cache.enabled = True

        return config

    def validate(self) -> None:
        """Validate configuration consistency."""
        assert self.search.default_page_size >= 1, "Default page size must be positive"
        assert (
            self.search.max_page_size >= self.search.default_page_size
        ), "Max page size must be >= default page size"
        assert self.search.request_timeout_seconds > 0, "Request timeout must be positive"
        assert self.activity.max_events >= 1, "Activity cap must be positive"
        assert (
            self.activity.preference_window <= self.activity.max_events
        ), "Preference window cannot exceed the activity cap"


# Global configuration instance
_global_config: Optional[EngineConfig] = None


def get_engine_config() -> EngineConfig:
    """Get global engine configuration (singleton pattern)."""
    global _global_config
    if _global_config is None:
        _global_config = EngineConfig.from_env()
        _global_config.validate()
    return _global_config


def reset_config() -> None:
    """Reset global configuration (useful for testing)."""
    global _global_config
    _global_config = None
