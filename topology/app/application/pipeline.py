"""
Pipeline: ordered, config-bound tasks threading one mutable Context.

A task function is ``async def fn(config, ctx) -> None``; it mutates ctx and
raises on failure. Decorating it with ``@task`` turns it into a factory: calling
``fn(config)`` returns a Task bound to that config, reusable across runs.

Pipeline.run allocates a fresh Context, runs tasks one after another and stops
at the first error. The PipelineResult always carries the context as it stood
at that point so the caller can tear down whatever was already built.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Sequence

from loguru import logger

from topology.app.config.topology import TopologyConfig
from topology.app.core import SERVICE_NAME
from topology.app.domain.context import Context

TaskFn = Callable[[TopologyConfig, Context], Awaitable[None]]
TaskFactory = Callable[[TopologyConfig], "Task"]


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@dataclass
class PipelineResult:
    """Outcome of a task or pipeline run: (error, config, context-so-far)."""

    error: Exception | None
    config: TopologyConfig
    context: Context

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Context:
        if self.error is not None:
            raise self.error
        return self.context


class Task:
    """A task function with its TopologyConfig fixed; only the Context varies per run."""

    def __init__(self, config: TopologyConfig, fn: TaskFn, *, name: str | None = None) -> None:
        self._config = config
        self._fn = fn
        self._name = name or getattr(fn, "__name__", "task")

    @property
    def config(self) -> TopologyConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    async def run(self, ctx: Context) -> PipelineResult:
        try:
            await self._fn(self._config, ctx)
        except Exception as exc:
            return PipelineResult(error=exc, config=self._config, context=ctx)
        return PipelineResult(error=None, config=self._config, context=ctx)

    def __repr__(self) -> str:
        return f"Task({self._name!r})"


def task(fn: TaskFn) -> TaskFactory:
    """Turn ``async def fn(config, ctx)`` into a factory of config-bound Tasks."""

    @functools.wraps(fn)
    def factory(config: TopologyConfig) -> Task:
        return Task(config, fn, name=fn.__name__)

    return factory


class Pipeline:
    """Runs config-bound tasks strictly in order, halting on the first failure."""

    def __init__(self, config: TopologyConfig, tasks: Sequence[Task], *, name: str = "pipeline") -> None:
        for t in tasks:
            if t.config is not config:
                raise ValueError(f"task {t.name} is bound to a different config than pipeline {name}")
        self._config = config
        self._tasks = tuple(tasks)
        self._name = name

    @classmethod
    def of(cls, config: TopologyConfig, factories: Iterable[TaskFactory], *, name: str = "pipeline") -> "Pipeline":
        return cls(config, [factory(config) for factory in factories], name=name)

    @property
    def config(self) -> TopologyConfig:
        return self._config

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def name(self) -> str:
        return self._name

    async def run(self, ctx: Context | None = None, **flags: Any) -> PipelineResult:
        """Run every task in order against ``ctx`` (a fresh Context seeded with ``flags`` by default).

        Flags only seed a fresh context; passing both ``ctx`` and flags is a TypeError.
        """
        if ctx is not None and flags:
            raise TypeError(f"pipeline {self._name}: pass flags or ctx, not both (got {sorted(flags)})")
        if ctx is None:
            ctx = Context(**flags)
        _log("pipeline_started", pipeline=self._name, vhost=self._config.name, tasks=len(self._tasks))
        for t in self._tasks:
            logger.debug("pipeline {} running task {}", self._name, t.name)
            result = await t.run(ctx)
            if result.error is not None:
                logger.warning("pipeline {} aborted at task {}: {}", self._name, t.name, result.error)
                _log("pipeline_failed", pipeline=self._name, vhost=self._config.name, task=t.name)
                return result
        _log("pipeline_completed", pipeline=self._name, vhost=self._config.name)
        return PipelineResult(error=None, config=self._config, context=ctx)
