"""Per-invocation pipeline state. Tasks add, consume and remove fields; config stays untouched."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from topology.app.ports.broker import BrokerChannel, BrokerConnection
    from topology.app.ports.redelivery_cache import RedeliveryCache
    from topology.app.ports.vhost import VhostAdmin


@dataclass
class Context:
    """Transient handles shared by the tasks of one pipeline run."""

    connection: BrokerConnection | None = None
    channel: BrokerChannel | None = None
    channels: list[BrokerChannel] | None = None
    vhost: VhostAdmin | None = None
    cache: RedeliveryCache | None = None
    loggable_url: str | None = None
    # Purge every queue regardless of its own purge flag.
    purge: bool = False
