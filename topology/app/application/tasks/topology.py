"""
Topology tasks: assert, check, delete and purge exchanges and queues, and apply bindings.

Entries are processed strictly one at a time, in configuration order. The
first failure stops the iteration; entries already processed are left as they
are and later entries are never attempted.
"""
from __future__ import annotations

from typing import Any, Awaitable

from loguru import logger

from topology.app.application.pipeline import task
from topology.app.config.topology import BindingConfig, TopologyConfig
from topology.app.core import SERVICE_NAME
from topology.app.domain.context import Context
from topology.app.domain.errors import ContextStateError, TopologyError
from topology.app.ports.broker import BrokerChannel


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _require_channel(ctx: Context, task_name: str) -> BrokerChannel:
    if ctx.channel is None:
        raise ContextStateError("channel", task_name)
    return ctx.channel


async def _attempt(operation: str, fully_qualified_name: str, call: Awaitable[None]) -> None:
    try:
        await call
    except Exception as exc:
        raise TopologyError(operation, fully_qualified_name, str(exc)) from exc
    _log(operation, name=fully_qualified_name)


@task
async def assert_exchanges(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "assert_exchanges")
    for exchange in config.exchanges.values():
        if not exchange.assert_:
            continue
        # The default exchange always exists and cannot be declared.
        if exchange.fully_qualified_name == "":
            continue
        logger.debug("asserting exchange {}", exchange.fully_qualified_name)
        await _attempt(
            "exchange_asserted",
            exchange.fully_qualified_name,
            channel.assert_exchange(exchange.fully_qualified_name, exchange.type, exchange.options),
        )


@task
async def check_exchanges(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "check_exchanges")
    for exchange in config.exchanges.values():
        if not exchange.check:
            continue
        logger.debug("checking exchange {}", exchange.fully_qualified_name)
        await _attempt(
            "exchange_checked",
            exchange.fully_qualified_name,
            channel.check_exchange(exchange.fully_qualified_name),
        )


@task
async def delete_exchanges(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "delete_exchanges")
    for exchange in config.exchanges.values():
        if exchange.fully_qualified_name == "":
            continue
        logger.debug("deleting exchange {}", exchange.fully_qualified_name)
        await _attempt(
            "exchange_deleted",
            exchange.fully_qualified_name,
            channel.delete_exchange(exchange.fully_qualified_name),
        )


@task
async def assert_queues(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "assert_queues")
    for queue in config.queues.values():
        if not queue.assert_:
            continue
        logger.debug("asserting queue {}", queue.fully_qualified_name)
        await _attempt(
            "queue_asserted",
            queue.fully_qualified_name,
            channel.assert_queue(queue.fully_qualified_name, queue.options),
        )


@task
async def check_queues(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "check_queues")
    for queue in config.queues.values():
        if not queue.check:
            continue
        logger.debug("checking queue {}", queue.fully_qualified_name)
        await _attempt(
            "queue_checked",
            queue.fully_qualified_name,
            channel.check_queue(queue.fully_qualified_name),
        )


@task
async def delete_queues(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "delete_queues")
    for queue in config.queues.values():
        logger.debug("deleting queue {}", queue.fully_qualified_name)
        await _attempt(
            "queue_deleted",
            queue.fully_qualified_name,
            channel.delete_queue(queue.fully_qualified_name),
        )


@task
async def purge_queues(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "purge_queues")
    for queue in config.queues.values():
        if not (queue.purge or ctx.purge):
            continue
        logger.debug("purging queue {}", queue.fully_qualified_name)
        await _attempt(
            "queue_purged",
            queue.fully_qualified_name,
            channel.purge_queue(queue.fully_qualified_name),
        )


@task
async def apply_bindings(config: TopologyConfig, ctx: Context) -> None:
    channel = _require_channel(ctx, "apply_bindings")
    for binding in config.bindings.values():
        await _bind(config, channel, binding)


async def _bind(config: TopologyConfig, channel: BrokerChannel, binding: BindingConfig) -> None:
    source = config.exchanges.get(binding.source)
    if source is None:
        raise TopologyError("binding_applied", binding.name, f"unknown source: {binding.source}")

    if binding.destination_type == "queue":
        queue = config.queues.get(binding.destination)
        if queue is None:
            raise TopologyError("binding_applied", binding.name, f"unknown destination: {binding.destination}")
        logger.debug(
            "binding queue {} to exchange {} with key {!r}",
            queue.fully_qualified_name,
            source.fully_qualified_name,
            binding.binding_key,
        )
        call = channel.bind_queue(
            queue.fully_qualified_name, source.fully_qualified_name, binding.binding_key, binding.options
        )
    elif binding.destination_type == "exchange":
        exchange = config.exchanges.get(binding.destination)
        if exchange is None:
            raise TopologyError("binding_applied", binding.name, f"unknown destination: {binding.destination}")
        logger.debug(
            "binding exchange {} to exchange {} with key {!r}",
            exchange.fully_qualified_name,
            source.fully_qualified_name,
            binding.binding_key,
        )
        call = channel.bind_exchange(
            exchange.fully_qualified_name, source.fully_qualified_name, binding.binding_key, binding.options
        )
    else:
        raise TopologyError(
            "binding_applied", binding.name, f"unknown destination type: {binding.destination_type}"
        )
    await _attempt("binding_applied", binding.name, call)
