"""
Caching Module
Optional Redis cache for best-effort endpoint results.
"""

from .redis_cache import RedisCacheError, ResultCache

__all__ = ["ResultCache", "RedisCacheError"]
