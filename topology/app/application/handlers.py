"""Default channel error/close handlers. Registered with (config, ctx) already bound."""
from __future__ import annotations

from typing import Any

from loguru import logger

from topology.app.config.topology import TopologyConfig
from topology.app.core import SERVICE_NAME
from topology.app.domain.context import Context
from topology.app.ports.broker import BrokerChannel


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def log_channel_error(
    config: TopologyConfig, ctx: Context, channel: BrokerChannel, exc: BaseException | None
) -> None:
    logger.warning("channel error on vhost {} ({}): {}", config.name, ctx.loggable_url, exc)


def log_channel_close(
    config: TopologyConfig, ctx: Context, channel: BrokerChannel, exc: BaseException | None
) -> None:
    _log("channel_closed_by_broker" if exc else "channel_closed", vhost=config.name, url=ctx.loggable_url)
