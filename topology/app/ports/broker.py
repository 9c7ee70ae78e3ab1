"""Ports: broker connection and channel contracts. The AMQP client adapter implements them.

Tasks depend only on these protocols; the aio-pika adapter lives in infrastructure.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Protocol

ChannelCallback = Callable[["BrokerChannel", "BaseException | None"], None]


class BrokerChannel(Protocol):
    async def assert_exchange(self, name: str, type: str, options: Mapping[str, Any]) -> None: ...

    async def assert_queue(self, name: str, options: Mapping[str, Any]) -> None: ...

    async def check_exchange(self, name: str) -> None:
        """Passive declare; raise when the exchange does not exist."""
        ...

    async def check_queue(self, name: str) -> None:
        """Passive declare; raise when the queue does not exist."""
        ...

    async def delete_exchange(self, name: str) -> None: ...

    async def delete_queue(self, name: str) -> None: ...

    async def purge_queue(self, name: str) -> None: ...

    async def bind_queue(
        self, queue: str, exchange: str, binding_key: str, options: Mapping[str, Any]
    ) -> None: ...

    async def bind_exchange(
        self, destination: str, source: str, binding_key: str, options: Mapping[str, Any]
    ) -> None: ...

    def on_error(self, handler: ChannelCallback) -> None: ...

    def on_close(self, handler: ChannelCallback) -> None: ...

    async def close(self) -> None: ...


class BrokerConnection(Protocol):
    @property
    def is_closed(self) -> bool: ...

    async def channel(self) -> BrokerChannel: ...

    async def close(self) -> None: ...


Connector = Callable[[str], Awaitable[BrokerConnection]]
