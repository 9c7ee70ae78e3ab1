"""Redelivery cache factory: selects the cache policy from configuration."""
from __future__ import annotations

from topology.app.config.topology import RedeliveryCacheConfig
from topology.app.core.caches.in_memory import InMemoryRedeliveryCache
from topology.app.core.caches.no_cache import NoRedeliveryCache
from topology.app.ports.redelivery_cache import RedeliveryCache


def create_redelivery_cache(config: RedeliveryCacheConfig) -> RedeliveryCache:
    backend = config.backend.strip().lower()

    if backend == "inmemory":
        return InMemoryRedeliveryCache(size=config.size)

    if backend == "none":
        return NoRedeliveryCache()

    raise ValueError(f"Unsupported redelivery cache backend: {backend}")
