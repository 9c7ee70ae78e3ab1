"""Vhost lifecycle tasks: each delegates to one operation of the context's vhost administrator."""
from __future__ import annotations

from typing import Any

from loguru import logger

from topology.app.application.pipeline import TaskFactory, task
from topology.app.config.topology import TopologyConfig
from topology.app.core import SERVICE_NAME
from topology.app.domain.context import Context
from topology.app.domain.errors import ContextStateError, VhostAdminError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _delegate(operation: str) -> TaskFactory:
    async def run(config: TopologyConfig, ctx: Context) -> None:
        vhost = ctx.vhost
        if vhost is None:
            raise ContextStateError("vhost", f"{operation}_vhost")
        try:
            await getattr(vhost, operation)()
        except VhostAdminError:
            raise
        except Exception as exc:
            raise VhostAdminError(operation, vhost.name, str(exc)) from exc
        _log(f"vhost_{operation}", vhost=vhost.name)

    run.__name__ = run.__qualname__ = f"{operation}_vhost"
    return task(run)


bounce_vhost = _delegate("bounce")
disconnect_vhost = _delegate("disconnect")
forewarn_vhost = _delegate("forewarn")
nuke_vhost = _delegate("nuke")
purge_vhost = _delegate("purge")
shutdown_vhost = _delegate("shutdown")
