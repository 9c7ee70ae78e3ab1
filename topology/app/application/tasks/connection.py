"""Connection and channel lifecycle tasks."""
from __future__ import annotations

import asyncio
import functools
from typing import Any

from loguru import logger

from topology.app.application.pipeline import task
from topology.app.config.topology import TopologyConfig
from topology.app.core import SERVICE_NAME
from topology.app.domain.context import Context
from topology.app.domain.errors import BrokerConnectionError, ContextStateError
from topology.app.ports.broker import BrokerChannel, BrokerConnection


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _require_connection(ctx: Context, task_name: str) -> BrokerConnection:
    if ctx.connection is None:
        raise ContextStateError("connection", task_name)
    return ctx.connection


def _bind_handlers(config: TopologyConfig, ctx: Context, channel: BrokerChannel) -> None:
    if config.channel_error_handler is not None:
        channel.on_error(functools.partial(config.channel_error_handler, config, ctx))
    if config.channel_close_handler is not None:
        channel.on_close(functools.partial(config.channel_close_handler, config, ctx))


@task
async def connect(config: TopologyConfig, ctx: Context) -> None:
    loggable_url = config.connection.loggable_url
    if config.connector is None:
        raise BrokerConnectionError(f"no connector configured for {loggable_url}")
    _log("rmq_connecting", url=loggable_url)
    try:
        connection = await config.connector(config.connection.url)
    except Exception as exc:
        _log("rmq_connect_failed", url=loggable_url)
        raise BrokerConnectionError(f"failed to connect to {loggable_url}: {exc}") from exc
    ctx.connection = connection
    ctx.loggable_url = loggable_url
    _log("rmq_connected", url=loggable_url)


@task
async def create_channel(config: TopologyConfig, ctx: Context) -> None:
    connection = _require_connection(ctx, "create_channel")
    logger.debug("creating channel on {}", config.connection.loggable_url)
    try:
        channel = await connection.channel()
    except Exception as exc:
        raise BrokerConnectionError(f"failed to create channel: {exc}") from exc
    _bind_handlers(config, ctx, channel)
    ctx.channel = channel
    _log("channel_created")


@task
async def create_channels(config: TopologyConfig, ctx: Context) -> None:
    connection = _require_connection(ctx, "create_channels")
    logger.debug("creating {} channels on {}", config.concurrency, config.connection.loggable_url)
    outcomes = await asyncio.gather(
        *(connection.channel() for _ in range(config.concurrency)),
        return_exceptions=True,
    )
    failures = [o for o in outcomes if isinstance(o, BaseException)]
    if failures:
        opened = [o for o in outcomes if not isinstance(o, BaseException)]
        await _discard_channels(opened)
        first = failures[0]
        raise BrokerConnectionError(
            f"failed to create {len(failures)} of {config.concurrency} channels: {first}"
        ) from first

    channels: list[BrokerChannel] = list(outcomes)  # type: ignore[arg-type]
    for channel in channels:
        _bind_handlers(config, ctx, channel)
    ctx.channels = channels
    _log("channels_created", count=len(channels))


async def _discard_channels(channels: list[BrokerChannel]) -> None:
    for channel in channels:
        try:
            await channel.close()
        except Exception as exc:
            logger.warning("closing channel after failed create_channels failed: {}", exc)


@task
async def close_channel(config: TopologyConfig, ctx: Context) -> None:
    if ctx.channel is None:
        return
    logger.debug("closing channel")
    await ctx.channel.close()
    ctx.channel = None
    _log("channel_closed")


@task
async def close_channels(config: TopologyConfig, ctx: Context) -> None:
    channels = ctx.channels or []
    logger.debug("closing {} channels", len(channels))
    try:
        outcomes = await asyncio.gather(*(c.close() for c in channels), return_exceptions=True)
    finally:
        ctx.channels = None
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    _log("channels_closed", count=len(channels))


@task
async def close_connection(config: TopologyConfig, ctx: Context) -> None:
    connection = ctx.connection
    if connection is None:
        return
    _log("rmq_disconnecting", url=config.connection.loggable_url)
    if not connection.is_closed:
        await connection.close()
    ctx.connection = None
    _log("rmq_disconnected", url=config.connection.loggable_url)
