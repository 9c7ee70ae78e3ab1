"""
aio-pika adapters implementing the BrokerConnection and BrokerChannel ports.

A plain (non-robust) connection is used: reconnecting and retrying are left to
the caller, so a failed connect or a dropped connection surfaces as an error.

Checks use passive declares. RabbitMQ closes the channel when a passive declare
fails, so a failed check leaves the channel unusable for the rest of the pipeline.
"""
from __future__ import annotations

import asyncio
from typing import Any, Mapping

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractConnection
from loguru import logger

from topology.app.ports.broker import ChannelCallback


class AioPikaChannel:
    """Implements topology.app.ports.broker.BrokerChannel for aio_pika."""

    def __init__(self, channel: AbstractChannel) -> None:
        self._channel = channel
        self._error_handlers: list[ChannelCallback] = []
        self._close_handlers: list[ChannelCallback] = []
        self._channel.close_callbacks.add(self._on_channel_closed)

    @property
    def raw(self) -> AbstractChannel:
        return self._channel

    def _on_channel_closed(self, sender: Any, exc: BaseException | None = None, *args: Any) -> None:
        if exc is not None and not isinstance(exc, asyncio.CancelledError):
            for handler in self._error_handlers:
                handler(self, exc)
        for handler in self._close_handlers:
            handler(self, exc)

    def on_error(self, handler: ChannelCallback) -> None:
        self._error_handlers.append(handler)

    def on_close(self, handler: ChannelCallback) -> None:
        self._close_handlers.append(handler)

    async def assert_exchange(self, name: str, type: str, options: Mapping[str, Any]) -> None:
        await self._channel.declare_exchange(name, type=type, **dict(options))

    async def assert_queue(self, name: str, options: Mapping[str, Any]) -> None:
        await self._channel.declare_queue(name, **dict(options))

    async def check_exchange(self, name: str) -> None:
        await self._channel.get_exchange(name, ensure=True)

    async def check_queue(self, name: str) -> None:
        await self._channel.get_queue(name, ensure=True)

    async def delete_exchange(self, name: str) -> None:
        await self._channel.exchange_delete(name)

    async def delete_queue(self, name: str) -> None:
        await self._channel.queue_delete(name)

    async def purge_queue(self, name: str) -> None:
        queue = await self._channel.get_queue(name, ensure=False)
        await queue.purge()

    async def bind_queue(
        self, queue: str, exchange: str, binding_key: str, options: Mapping[str, Any]
    ) -> None:
        target = await self._channel.get_queue(queue, ensure=False)
        await target.bind(exchange, routing_key=binding_key, arguments=dict(options) or None)

    async def bind_exchange(
        self, destination: str, source: str, binding_key: str, options: Mapping[str, Any]
    ) -> None:
        target = await self._channel.get_exchange(destination, ensure=False)
        await target.bind(source, routing_key=binding_key, arguments=dict(options) or None)

    async def close(self) -> None:
        if self._channel.is_closed:
            return
        await self._channel.close()


class AioPikaConnection:
    """Implements topology.app.ports.broker.BrokerConnection for aio_pika."""

    def __init__(self, connection: AbstractConnection) -> None:
        self._connection = connection

    @property
    def is_closed(self) -> bool:
        return self._connection.is_closed

    async def channel(self) -> AioPikaChannel:
        return AioPikaChannel(await self._connection.channel())

    async def close(self) -> None:
        try:
            await self._connection.close()
        except aio_pika.exceptions.ConnectionClosed as exc:
            logger.debug("connection already closed: {}", exc)


async def connect_aio_pika(url: str) -> AioPikaConnection:
    return AioPikaConnection(await aio_pika.connect(url))
