"""
Tests for the Redis result cache, against an in-process stand-in client.
"""

import redis

from catalog_engine.caching import ResultCache
from catalog_engine.config import CacheConfig

from helpers import FakeRedis


def test_key_uses_prefix():
    cache = ResultCache(CacheConfig(key_prefix="cat"), client=FakeRedis())

    assert cache.key("similar", "p01", 4) == "cat:similar:p01:4"


def test_set_get_delete():
    client = FakeRedis()
    cache = ResultCache(CacheConfig(), client=client)

    assert cache.set("k", {"ids": ["p01"]}, ttl=30)
    assert cache.get("k") == {"ids": ["p01"]}
    assert client.ttls["k"] == 30

    assert cache.delete("k")
    assert cache.get("k") is None


def test_get_or_compute_caches_non_empty_results():
    cache = ResultCache(CacheConfig(), client=FakeRedis())
    calls = []

    def compute():
        calls.append(1)
        return ["p05", "p01"]

    assert cache.get_or_compute("trending", compute, ttl=60) == ["p05", "p01"]
    assert cache.get_or_compute("trending", compute, ttl=60) == ["p05", "p01"]
    assert len(calls) == 1


def test_get_or_compute_skips_empty_results():
    client = FakeRedis()
    cache = ResultCache(CacheConfig(), client=client)

    assert cache.get_or_compute("similar", lambda: [], ttl=60) == []
    assert client.data == {}


def test_redis_errors_are_misses():
    cache = ResultCache(CacheConfig(), client=FakeRedis(fail=True))

    assert cache.get("k") is None
    assert not cache.set("k", [1])
    assert not cache.ping()
    assert cache.get_or_compute("k", lambda: ["fresh"]) == ["fresh"]


def test_corrupt_value_is_a_miss():
    client = FakeRedis()
    client.data["k"] = b"not a pickle"
    cache = ResultCache(CacheConfig(), client=client)

    assert cache.get("k") is None


def test_failed_connect_backs_off(monkeypatch):
    attempts = []

    class Unreachable:
        def __init__(self, **kwargs):
            attempts.append(kwargs)

        def ping(self):
            raise redis.ConnectionError("connection refused")

    monkeypatch.setattr(redis, "Redis", Unreachable)
    cache = ResultCache(CacheConfig(redis_port=1, reconnect_backoff_seconds=60))

    for _ in range(3):
        assert cache.get("k") is None
    assert not cache.set("k", [1])
    assert len(attempts) == 1

    cache._retry_at = 0.0
    assert cache.get("k") is None
    assert len(attempts) == 2
