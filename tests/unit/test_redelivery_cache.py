"""Unit tests for redelivery cache policies."""
from __future__ import annotations

import threading

import pytest

from topology.app.config.topology import RedeliveryCacheConfig
from topology.app.core.caches import create_redelivery_cache, InMemoryRedeliveryCache, NoRedeliveryCache


def test_in_memory_increments_per_key():
    cache = InMemoryRedeliveryCache(size=3)
    assert cache.increment_and_get("X") == 1
    assert cache.increment_and_get("X") == 2
    assert cache.increment_and_get("Y") == 1


def test_no_cache_always_returns_zero():
    cache = NoRedeliveryCache()
    assert cache.increment_and_get("X") == 0
    assert cache.increment_and_get("X") == 0
    assert len(cache) == 0


def test_in_memory_evicts_exactly_least_recently_used_key():
    cache = InMemoryRedeliveryCache(size=3)
    for key in ["one", "two", "three", "four"]:
        cache.increment_and_get(key)

    assert "one" not in cache
    assert all(key in cache for key in ["two", "three", "four"])
    assert len(cache) == 3


def test_in_memory_recent_access_protects_key_from_eviction():
    cache = InMemoryRedeliveryCache(size=3)
    for key in ["one", "two", "three", "one", "four"]:
        cache.increment_and_get(key)

    assert "two" not in cache
    assert cache.increment_and_get("one") == 3


def test_evicted_key_starts_again_from_one():
    cache = InMemoryRedeliveryCache(size=3)
    for key in ["one", "two", "three", "four"]:
        cache.increment_and_get(key)
    assert cache.increment_and_get("one") == 1


def test_in_memory_increments_are_atomic_across_threads():
    cache = InMemoryRedeliveryCache(size=10)
    per_thread = 2000
    threads = [
        threading.Thread(target=lambda: [cache.increment_and_get("hot") for _ in range(per_thread)])
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.increment_and_get("hot") == 8 * per_thread + 1


def test_in_memory_rejects_non_positive_size():
    with pytest.raises(ValueError):
        InMemoryRedeliveryCache(size=0)


def test_factory_selects_policy_from_config():
    assert isinstance(create_redelivery_cache(RedeliveryCacheConfig(backend="inmemory", size=5)), InMemoryRedeliveryCache)
    assert isinstance(create_redelivery_cache(RedeliveryCacheConfig(backend=" None ")), NoRedeliveryCache)
    with pytest.raises(ValueError, match="Unsupported redelivery cache backend"):
        create_redelivery_cache(RedeliveryCacheConfig(backend="redis"))
