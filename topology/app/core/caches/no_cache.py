"""Redelivery cache used when redelivery tracking is disabled."""
from __future__ import annotations


class NoRedeliveryCache:
    """Same contract as InMemoryRedeliveryCache, but never remembers anything."""

    def increment_and_get(self, key: str) -> int:
        return 0

    def __contains__(self, key: object) -> bool:
        return False

    def __len__(self) -> int:
        return 0
