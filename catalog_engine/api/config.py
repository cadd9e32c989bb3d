"""
API Configuration
Settings for the FastAPI application.
"""

import json
from typing import Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """
    API configuration settings.

    Loaded from environment variables (and .env).
    """

    # API Info
    app_name: str = "Catalog Query Engine"
    version: str = "0.1.0"
    description: str = "Product search, facets, autocomplete and personalized recommendations"

    # Server settings
    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    reload: bool = Field(default=False, alias="API_RELOAD")

    # CORS settings
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        alias="API_CORS_ORIGINS"
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # Storage: "memory" keeps catalog and activity logs in process
    storage_backend: str = Field(default="memory", alias="CATALOG_STORAGE")
    database_url: str = Field(default="sqlite:///./catalog.db", alias="DATABASE_URL")
    seed_file: Optional[str] = Field(default=None, alias="CATALOG_SEED_FILE")

    # Result cache (trending / similar)
    enable_cache: bool = Field(default=False, alias="CATALOG_CACHE_ENABLED")
    cache_ttl_trending: int = Field(default=300, alias="CATALOG_CACHE_TTL_TRENDING")  # 5 min
    cache_ttl_similar: int = Field(default=3600, alias="CATALOG_CACHE_TTL_SIMILAR")  # 1 hour

    # Endpoint defaults
    recommendations_default_limit: int = 8

    # Logging
    log_level: str = Field(default="INFO", alias="API_LOG_LEVEL")

    # Requests slower than this are logged as warnings
    slow_request_ms: int = 300

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> List[str]:
        """Parse CORS origins from JSON string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # Fall back to comma-separated list
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("storage_backend")
    @classmethod
    def check_storage_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("memory", "sql"):
            raise ValueError(f"Unknown storage backend: {v}")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix="",
        validate_default=True,
        populate_by_name=True,
    )


# Global settings instance
_settings: Optional[APISettings] = None


def get_settings() -> APISettings:
    """Get global API settings (singleton)."""
    global _settings
    if _settings is None:
        _settings = APISettings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
