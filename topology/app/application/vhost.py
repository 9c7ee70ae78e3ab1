"""
Vhost: administrative operations on one virtual host, each expressed as a pipeline.

Lifecycle:
  init():     connect -> channel -> assert/check exchanges and queues -> purge ->
              bindings -> redelivery cache -> close channel. Keeps the connection,
              closing any connection held from an earlier init first.
              On failure, the partially built context is torn down and the error re-raised.
  bounce():   disconnect, then init.
  purge():    a short-lived connection purging every queue (force purge).
  nuke():     a short-lived connection deleting every exchange and queue.
              purge() and nuke() close their connection when a step fails.
  forewarn(): refuse new channels ahead of shutdown.
  shutdown(): forewarn, then disconnect.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from topology.app.application import tasks
from topology.app.application.pipeline import Pipeline, PipelineResult
from topology.app.config.topology import TopologyConfig
from topology.app.core import SERVICE_NAME
from topology.app.domain.context import Context
from topology.app.domain.errors import ContextStateError, VhostAdminError
from topology.app.ports.broker import BrokerChannel, BrokerConnection
from topology.app.ports.redelivery_cache import RedeliveryCache


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class Vhost:
    """VhostAdmin implementation driving topology pipelines for one config."""

    def __init__(self, config: TopologyConfig) -> None:
        self._config = config
        self._connection: BrokerConnection | None = None
        self._cache: RedeliveryCache | None = None
        self._shutting_down = False

        self._init = Pipeline.of(
            config,
            [
                tasks.connect,
                tasks.create_channel,
                tasks.assert_exchanges,
                tasks.check_exchanges,
                tasks.assert_queues,
                tasks.check_queues,
                tasks.purge_queues,
                tasks.apply_bindings,
                tasks.init_cache,
                tasks.close_channel,
            ],
            name="init",
        )
        self._teardown = Pipeline.of(config, [tasks.close_channel, tasks.close_connection], name="teardown")
        self._connect = Pipeline.of(config, [tasks.connect], name="connect")
        self._purge = Pipeline.of(
            config,
            [
                tasks.connect,
                tasks.create_channel,
                tasks.purge_queues,
                tasks.close_channel,
                tasks.close_connection,
            ],
            name="purge",
        )
        self._nuke = Pipeline.of(
            config,
            [
                tasks.connect,
                tasks.create_channel,
                tasks.delete_exchanges,
                tasks.delete_queues,
                tasks.close_channel,
                tasks.close_connection,
            ],
            name="nuke",
        )

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> TopologyConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._connection is not None and not self._connection.is_closed

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def redelivery_cache(self) -> RedeliveryCache:
        if self._cache is None:
            raise RuntimeError(f"vhost {self.name} is not initialised")
        return self._cache

    async def init(self) -> "Vhost":
        if self._shutting_down:
            _log("vhost_init_skipped", vhost=self.name, reason="shutting_down")
            return self
        if self._connection is not None:
            await self.disconnect()
        _log("vhost_initialising", vhost=self.name)
        result = await self._init.run()
        if not result.ok:
            await self._cleanup("init", result)
            result.raise_for_error()
        self._connection = result.context.connection
        self._cache = result.context.cache
        _log("vhost_initialised", vhost=self.name, url=result.context.loggable_url)
        return self

    async def _cleanup(self, operation: str, failed: PipelineResult) -> None:
        teardown = await self._teardown.run(failed.context)
        if not teardown.ok:
            logger.warning("vhost {} teardown after failed {} failed: {}", self.name, operation, teardown.error)

    async def connect(self) -> BrokerConnection:
        ctx = (await self._connect.run()).raise_for_error()
        return ctx.connection  # type: ignore[return-value]

    async def disconnect(self) -> None:
        _log("vhost_disconnecting", vhost=self.name)
        connection, self._connection = self._connection, None
        if connection is None or connection.is_closed:
            return
        await connection.close()

    async def bounce(self) -> None:
        await self.disconnect()
        await self.init()
        _log("vhost_bounced", vhost=self.name)

    async def purge(self) -> None:
        _log("vhost_purging", vhost=self.name)
        result = await self._purge.run(purge=True)
        if not result.ok:
            await self._cleanup("purge", result)
            result.raise_for_error()
        _log("vhost_purged", vhost=self.name)

    async def nuke(self) -> None:
        _log("vhost_nuking", vhost=self.name)
        await self.disconnect()
        result = await self._nuke.run()
        if not result.ok:
            await self._cleanup("nuke", result)
            result.raise_for_error()
        _log("vhost_nuked", vhost=self.name)

    async def forewarn(self) -> None:
        _log("vhost_forewarned", vhost=self.name)
        self._shutting_down = True

    async def shutdown(self) -> None:
        _log("vhost_shutting_down", vhost=self.name)
        await self.forewarn()
        await self.disconnect()

    async def get_channel(self) -> BrokerChannel:
        if self._shutting_down:
            raise VhostAdminError("get_channel", self.name, "vhost is shutting down")
        if self._connection is None:
            raise ContextStateError("connection", "get_channel")
        return await self._connection.channel()

    def context(self, **flags: Any) -> Context:
        """Context handing this vhost to vhost lifecycle tasks."""
        return Context(vhost=self, **flags)
