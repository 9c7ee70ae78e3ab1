from topology.app.core.caches.factory import create_redelivery_cache
from topology.app.core.caches.in_memory import InMemoryRedeliveryCache
from topology.app.core.caches.no_cache import NoRedeliveryCache

__all__ = ["create_redelivery_cache", "InMemoryRedeliveryCache", "NoRedeliveryCache"]
