"""Bounded in-memory redelivery counter with least-recently-used eviction.

Counts how many times a message (identified by a caller-chosen key) has been
delivered. The read-increment-store sequence runs under a threading lock so
concurrent consumers never lose an update, whether they share an event loop
or run on separate threads.
"""
from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Final

DEFAULT_CACHE_SIZE: Final[int] = 1000


class InMemoryRedeliveryCache:
    """RedeliveryCache implementation backed by an ordered dict."""

    def __init__(self, size: int = DEFAULT_CACHE_SIZE) -> None:
        if size < 1:
            raise ValueError(f"redelivery cache size must be positive, got {size}")
        self._size = int(size)
        self._counts: OrderedDict[str, int] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    def increment_and_get(self, key: str) -> int:
        with self._lock:
            redeliveries = self._counts.get(key, 0) + 1
            self._counts[key] = redeliveries
            self._counts.move_to_end(key)
            if len(self._counts) > self._size:
                self._counts.popitem(last=False)
            return redeliveries

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._counts

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
