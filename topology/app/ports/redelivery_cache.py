"""Port: redelivery counting used by consumers to decide on retry or dead-lettering."""
from __future__ import annotations

from typing import Protocol


class RedeliveryCache(Protocol):
    def increment_and_get(self, key: str) -> int:
        """Atomically add one to the count for key (0 when unseen) and return the new count."""
        ...
