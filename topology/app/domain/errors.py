"""Errors raised by pipeline tasks. Client errors are chained as __cause__."""
from __future__ import annotations


class PipelineError(Exception):
    """Base for every failure reported by a pipeline task."""


class BrokerConnectionError(PipelineError):
    """Opening a connection or channel failed."""


class ContextStateError(PipelineError):
    """A task ran before the task that provides the context field it consumes."""

    def __init__(self, field_name: str, task_name: str) -> None:
        super().__init__(f"{task_name} requires context.{field_name}, which is not set")
        self.field_name = field_name
        self.task_name = task_name


class TopologyError(PipelineError):
    """Asserting, checking, deleting, purging or binding a broker entity failed."""

    def __init__(self, operation: str, fully_qualified_name: str, message: str | None = None) -> None:
        detail = f": {message}" if message else ""
        super().__init__(f"{operation} failed for {fully_qualified_name!r}{detail}")
        self.operation = operation
        self.fully_qualified_name = fully_qualified_name


class VhostAdminError(PipelineError):
    """A vhost administrative operation failed."""

    def __init__(self, operation: str, vhost: str, message: str | None = None) -> None:
        detail = f": {message}" if message else ""
        super().__init__(f"vhost {operation} failed for {vhost!r}{detail}")
        self.operation = operation
        self.vhost = vhost
