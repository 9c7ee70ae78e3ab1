"""Connector factory: selects the broker client from config. Only place that imports concrete adapters."""
from __future__ import annotations

from topology.app.config.settings import Settings
from topology.app.infrastructure.messaging.rabbitmq.aio_pika_connection import connect_aio_pika
from topology.app.ports.broker import Connector


def create_connector(settings: Settings) -> Connector:
    backend = settings.connection_backend.strip().lower()

    if backend == "rabbitmq":
        return connect_aio_pika

    raise ValueError(f"Unsupported connection backend: {backend}")
