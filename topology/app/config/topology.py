"""Immutable, fully resolved topology configuration bound to pipeline tasks.

Everything here is already resolved by the caller: names are fully qualified,
options are final. Nothing in this package validates or defaults a topology
definition beyond the dataclass defaults below.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    from topology.app.domain.context import Context
    from topology.app.ports.broker import BrokerChannel, Connector

ChannelHandler = Callable[["TopologyConfig", "Context", "BrokerChannel", "BaseException | None"], None]

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not mapping:
        return _EMPTY
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ExchangeConfig:
    name: str
    fully_qualified_name: str
    type: str = "topic"
    options: Mapping[str, Any] = field(default_factory=dict)
    assert_: bool = True
    check: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _freeze(self.options))


@dataclass(frozen=True)
class QueueConfig:
    name: str
    fully_qualified_name: str
    options: Mapping[str, Any] = field(default_factory=dict)
    assert_: bool = True
    check: bool = True
    purge: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _freeze(self.options))


@dataclass(frozen=True)
class BindingConfig:
    """Binds `source` exchange to a `destination` queue or exchange, by config name."""

    name: str
    source: str
    destination: str
    destination_type: str = "queue"
    binding_key: str = ""
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _freeze(self.options))


@dataclass(frozen=True)
class ConnectionConfig:
    url: str
    loggable_url: str


@dataclass(frozen=True)
class RedeliveryCacheConfig:
    backend: str = "inmemory"
    size: int = 1000


@dataclass(frozen=True)
class TopologyConfig:
    connection: ConnectionConfig
    name: str = "/"
    exchanges: Mapping[str, ExchangeConfig] = field(default_factory=dict)
    queues: Mapping[str, QueueConfig] = field(default_factory=dict)
    bindings: Mapping[str, BindingConfig] = field(default_factory=dict)
    concurrency: int = 1
    redeliveries: RedeliveryCacheConfig = field(default_factory=RedeliveryCacheConfig)
    connector: Connector | None = None
    channel_error_handler: ChannelHandler | None = None
    channel_close_handler: ChannelHandler | None = None

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        object.__setattr__(self, "exchanges", _freeze(self.exchanges))
        object.__setattr__(self, "queues", _freeze(self.queues))
        object.__setattr__(self, "bindings", _freeze(self.bindings))

    @staticmethod
    def from_mapping(
        topology: Mapping[str, Any],
        *,
        connection: ConnectionConfig,
        **kwargs: Any,
    ) -> "TopologyConfig":
        """Build from a resolved mapping shaped like
        ``{"exchanges": {name: {...}}, "queues": {...}, "bindings": {...}}``.

        Entry keys mirror the dataclass fields; ``assert`` is accepted for
        ``assert_`` and a missing ``fully_qualified_name`` falls back to the entry name.
        """
        exchanges = {
            name: ExchangeConfig(name=name, **_entry_kwargs(name, entry))
            for name, entry in (topology.get("exchanges") or {}).items()
        }
        queues = {
            name: QueueConfig(name=name, **_entry_kwargs(name, entry))
            for name, entry in (topology.get("queues") or {}).items()
        }
        bindings = {
            name: BindingConfig(name=name, **dict(entry))
            for name, entry in (topology.get("bindings") or {}).items()
        }
        return TopologyConfig(
            connection=connection,
            exchanges=exchanges,
            queues=queues,
            bindings=bindings,
            **kwargs,
        )


def _entry_kwargs(name: str, entry: Mapping[str, Any]) -> dict[str, Any]:
    kwargs = dict(entry)
    if "assert" in kwargs:
        kwargs["assert_"] = kwargs.pop("assert")
    kwargs.setdefault("fully_qualified_name", name)
    return kwargs
