"""The task engine: a registry that can also run its tasks.

TaskEngine is the object task bodies receive as their second argument, so a
runnable can inspect the registry or start further resolutions through it.

A process-wide engine is available through ``get_engine()`` for taskfiles
and scripts that prefer a shared instance; ``init_engine`` and
``reset_engine`` control it explicitly (mainly for tests).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from taskengine.models import DependencyEntry, TaskSpec
from taskengine.registry import TaskRegistry
from taskengine.resolver import DependencyResolver

__all__ = [
    "TaskEngine",
    "get_engine",
    "init_engine",
    "reset_engine",
]

F = TypeVar("F", bound=Callable[..., Any])


class TaskEngine(TaskRegistry):
    """Task registry with dependency-aware execution.

    Example:
        ```python
        engine = TaskEngine()

        @engine.task()
        async def clean(options, engine, results):
            return "cleaned"

        lint_strict = {"task": "lint", "options": {"strict": True}}

        @engine.task(dependencies=["clean", lint_strict])
        async def build(options, engine, results):
            cleaned, linted = results
            return f"built {options['target']}"

        await engine.run("build", {"target": "release"})
        ```
    """

    def __init__(self, *, detect_cycles: bool = True) -> None:
        """Initialize an empty engine.

        Args:
            detect_cycles: Fail fast with CyclicDependencyError when a
                resolution reaches a task already on its own path.
        """
        super().__init__()
        self._resolver = DependencyResolver(self, detect_cycles=detect_cycles)

    @property
    def detect_cycles(self) -> bool:
        return self._resolver.detect_cycles

    def task(
        self,
        name: str | None = None,
        dependencies: Iterable[DependencyEntry] | None = None,
    ) -> Callable[[F], F]:
        """Decorator that registers the decorated function as a task.

        Args:
            name: Task name. Defaults to the function's ``__name__``.
            dependencies: Dependency list.

        Returns:
            Decorator returning the function unchanged.
        """

        def decorator(fn: F) -> F:
            self.register_spec(TaskSpec.named(name, fn, dependencies))
            return fn

        return decorator

    async def run(self, name: str, options: Mapping[str, Any] | None = None) -> Any:
        """Run a task after its dependency chain.

        Args:
            name: Name of the task to run.
            options: Options passed to the task and inherited by its
                dependencies. Defaults to an empty dict.

        Returns:
            The task's result.
        """
        return await self._resolver.resolve_and_run(
            name, {} if options is None else options
        )

    async def run_direct(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Run a task's own runnable only, skipping its dependencies.

        Args:
            name: Name of the task to run.
            options: Options passed to the task. Defaults to an empty dict.

        Returns:
            The task's result.
        """
        return await self._resolver.run_direct(
            name, {} if options is None else options
        )


_instance: TaskEngine | None = None


def get_engine() -> TaskEngine:
    """Return the process-wide engine, creating it on first access."""
    global _instance
    if _instance is None:
        _instance = TaskEngine()
    return _instance


def init_engine(engine: TaskEngine | None = None) -> TaskEngine:
    """Install ``engine`` (or a fresh TaskEngine) as the process-wide engine.

    Returns:
        The installed engine.
    """
    global _instance
    _instance = engine if engine is not None else TaskEngine()
    return _instance


def reset_engine() -> None:
    """Discard the process-wide engine; the next get_engine() builds a new one."""
    global _instance
    _instance = None
