"""Dependency resolver that runs a task after its dependency chain.

This module provides DependencyResolver which:
1. Resolves a task's dependencies recursively, one at a time, in declaration
   order (never in parallel)
2. Gives each dependency its own options dict with that edge's override
   merged on top of the inherited options
3. Hands the collected results, in declaration order, to the task's runnable
4. Stops at the first failure and lets the original exception propagate

Nothing is cached: a task reached through several paths runs once per path.
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from taskengine.exceptions import (
    CyclicDependencyError,
    DependencyNotFoundError,
    TaskNotFoundError,
)
from taskengine.logging import get_logger

if TYPE_CHECKING:
    from taskengine.engine import TaskEngine
    from taskengine.models import Task

__all__ = ["DependencyResolver"]

logger = get_logger(__name__)


class DependencyResolver:
    """Executes tasks together with their dependency chains.

    The resolver reads tasks from the engine at the moment each name is
    needed, so a task re-registered while a resolution is running is picked
    up by any lookup that happens afterwards.

    Example:
        ```python
        resolver = DependencyResolver(engine)
        result = await resolver.resolve_and_run("deploy", {"env": "staging"})

        # Only the task itself, dependencies are ignored
        result = await resolver.run_direct("deploy", {"env": "staging"})
        ```
    """

    def __init__(self, engine: TaskEngine, *, detect_cycles: bool = True) -> None:
        """Initialize the resolver.

        Args:
            engine: Engine the tasks are looked up in. It is also the handle
                passed to every runnable.
            detect_cycles: Fail with CyclicDependencyError when a task is
                reached again on its own resolution path. When False, a cycle
                recurses until Python raises RecursionError.
        """
        self._engine = engine
        self._detect_cycles = detect_cycles

    @property
    def detect_cycles(self) -> bool:
        return self._detect_cycles

    async def resolve_and_run(self, name: str, options: Mapping[str, Any]) -> Any:
        """Run a task after resolving all of its dependencies.

        Args:
            name: Name of the task to run.
            options: Options for the task; dependencies inherit them.

        Returns:
            Whatever the task's runnable returned (awaited if needed).

        Raises:
            TaskNotFoundError: If ``name`` is not registered.
            DependencyNotFoundError: If a declared dependency is not registered
                when it is reached.
            CyclicDependencyError: If cycle detection is on and a task depends
                on itself, directly or transitively.
            Exception: Any exception raised by a runnable, unchanged.
        """
        return await self._resolve(name, options, ())

    async def run_direct(self, name: str, options: Mapping[str, Any]) -> Any:
        """Run only the task's own runnable, with an empty results list.

        Raises:
            TaskNotFoundError: If ``name`` is not registered.
            Exception: Any exception raised by the runnable, unchanged.
        """
        task = self._engine.lookup(name)
        if task is None:
            raise TaskNotFoundError(name)
        return await self._invoke(task, options, [])

    async def _resolve(
        self,
        name: str,
        options: Mapping[str, Any],
        path: tuple[str, ...],
    ) -> Any:
        task = self._engine.lookup(name)
        if task is None:
            raise TaskNotFoundError(name)

        if self._detect_cycles:
            if name in path:
                raise CyclicDependencyError(name, (*path, name))
            path = (*path, name)

        results: list[Any] = []
        for dependency in task.dependencies:
            if not self._engine.can_run(dependency.task_name):
                logger.warning(
                    "dependency_missing",
                    task=name,
                    dependency=dependency.task_name,
                )
                raise DependencyNotFoundError(name, dependency.task_name)

            result = await self._resolve(
                dependency.task_name,
                dependency.merge_options(options),
                path,
            )
            results.append(result)

        return await self._invoke(task, options, results)

    async def _invoke(
        self,
        task: Task,
        options: Mapping[str, Any],
        results: list[Any],
    ) -> Any:
        """Call the runnable and await its result if it returned an awaitable."""
        start_time = time.monotonic()
        logger.debug("task_started", task=task.name, results=len(results))

        try:
            value = task.runnable(options, self._engine, list(results))
            if inspect.isawaitable(value):
                value = await value
        except Exception:
            logger.debug(
                "task_failed",
                task=task.name,
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )
            raise

        logger.debug(
            "task_completed",
            task=task.name,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return value
