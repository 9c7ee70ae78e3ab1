"""Redelivery cache task."""
from __future__ import annotations

from topology.app.application.pipeline import task
from topology.app.config.topology import TopologyConfig
from topology.app.core.caches.factory import create_redelivery_cache
from topology.app.domain.context import Context


@task
async def init_cache(config: TopologyConfig, ctx: Context) -> None:
    ctx.cache = create_redelivery_cache(config.redeliveries)
