"""
Redis Result Cache
TTL cache for best-effort endpoint results (trending, similar products).
"""

import logging
import pickle
import threading
import time
from typing import Any, Callable, Optional

import redis
from redis.connection import ConnectionPool

from ..config import CacheConfig, get_engine_config

logger = logging.getLogger(__name__)


class RedisCacheError(Exception):
    """Exception raised for Redis cache errors."""

    pass


class ResultCache:
    """
    Redis cache client with connection pooling.

    Cache failures never fail a request: reads miss and writes are dropped.
    """

    def __init__(self, config: Optional[CacheConfig] = None, client: Optional[redis.Redis] = None):
        """
        Initialize result cache.

        Args:
            config: Cache configuration
            client: Pre-built Redis client (skips pool creation)
        """
        self.config = config or get_engine_config().cache
        self.client = client
        self.pool = None
        self._client_lock = threading.Lock()
        self._retry_at = 0.0

        if client is None:
            self.pool = ConnectionPool(
                host=self.config.redis_host,
                port=self.config.redis_port,
                db=self.config.redis_db,
                password=self.config.redis_password,
                decode_responses=False,  # Values are pickled
                max_connections=20,
                socket_timeout=2,
                socket_connect_timeout=2,
            )

            logger.info(
                f"Result cache initialized: {self.config.redis_host}:"
                f"{self.config.redis_port} (db={self.config.redis_db})"
            )

    def _get_client(self) -> redis.Redis:
        """
        Get Redis client (lazy initialization).

        Raises:
            RedisCacheError: If connection fails
        """
        with self._client_lock:
            if self.client is None:
                if time.monotonic() < self._retry_at:
                    raise RedisCacheError("Redis unavailable, retrying later")
                try:
                    client = redis.Redis(connection_pool=self.pool)
                    client.ping()
                    self.client = client
                    logger.info("Redis connection established")
                except redis.RedisError as e:
                    self._retry_at = time.monotonic() + self.config.reconnect_backoff_seconds
                    raise RedisCacheError(f"Failed to connect to Redis: {e}") from e

        return self.client

    def key(self, *parts: Any) -> str:
        return ":".join([self.config.key_prefix, *(str(p) for p in parts)])

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value or None if missing or unreadable
        """
        try:
            data = self._get_client().get(key)
        except (redis.RedisError, RedisCacheError) as e:
            logger.warning(f"Redis GET error for key '{key}': {e}")
            return None

        if data is None:
            return None

        try:
            return pickle.loads(data)
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as e:
            logger.error(f"Error deserializing cached data for key '{key}': {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache (will be pickled)
            ttl: Time-to-live in seconds (None = no expiration)

        Returns:
            True if successful, False otherwise
        """
        data = pickle.dumps(value)

        try:
            client = self._get_client()
            if ttl is not None:
                client.setex(key, ttl, data)
            else:
                client.set(key, data)
            return True
        except (redis.RedisError, RedisCacheError) as e:
            logger.warning(f"Redis SET error for key '{key}': {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            return self._get_client().delete(key) > 0
        except (redis.RedisError, RedisCacheError) as e:
            logger.warning(f"Redis DELETE error for key '{key}': {e}")
            return False

    def get_or_compute(self, key: str, compute: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """
        Return the cached value, or compute, cache and return it.

        Empty results are not cached so a degraded response is not pinned
        for the whole TTL.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        value = compute()
        if value:
            self.set(key, value, ttl)

        return value

    def ping(self) -> bool:
        """
        Test Redis connection.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            return bool(self._get_client().ping())
        except (redis.RedisError, RedisCacheError) as e:
            logger.warning(f"Redis PING error: {e}")
            return False
