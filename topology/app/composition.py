"""Composition root: turn settings and a resolved topology into a TopologyConfig and a Vhost.

Composition may: import concrete classes, call factories, wire default handlers.
"""
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from topology.app.application.handlers import log_channel_close, log_channel_error
from topology.app.application.vhost import Vhost
from topology.app.config.settings import Settings
from topology.app.config.topology import ConnectionConfig, RedeliveryCacheConfig, TopologyConfig
from topology.app.infrastructure.messaging.factory import create_connector


def build_connection_config(settings: Settings) -> ConnectionConfig:
    """AMQP URL for the settings, plus the same URL with the password masked for logging."""
    vhost = quote(settings.broker_vhost, safe="")
    auth = f"{quote(settings.broker_user, safe='')}:{quote(settings.broker_password, safe='')}"
    address = f"{settings.broker_host}:{settings.broker_port}/{vhost}"
    return ConnectionConfig(
        url=f"amqp://{auth}@{address}",
        loggable_url=f"amqp://{quote(settings.broker_user, safe='')}:***@{address}",
    )


def build_topology_config(
    settings: Settings,
    topology: Mapping[str, Any] | None = None,
    **overrides: Any,
) -> TopologyConfig:
    kwargs: dict[str, Any] = {
        "name": settings.broker_vhost,
        "concurrency": settings.channel_concurrency,
        "redeliveries": RedeliveryCacheConfig(
            backend=settings.redelivery_cache_backend,
            size=settings.redelivery_cache_size,
        ),
        "connector": create_connector(settings),
        "channel_error_handler": log_channel_error,
        "channel_close_handler": log_channel_close,
    }
    kwargs.update(overrides)
    return TopologyConfig.from_mapping(
        topology or {},
        connection=build_connection_config(settings),
        **kwargs,
    )


def create_vhost(
    settings: Settings | None = None,
    topology: Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Vhost:
    """Build a Vhost; the caller owns its lifecycle (init/shutdown)."""
    return Vhost(build_topology_config(settings or Settings(), topology, **overrides))
