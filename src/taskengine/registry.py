"""Task registry: the name-to-task catalog.

This module provides TaskRegistry, which normalizes the supported
registration shapes into TaskSpec values and keeps the registered tasks in
registration order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Self

from taskengine.exceptions import TaskNotFoundError
from taskengine.logging import get_logger
from taskengine.models import DependencyEntry, Task, TaskSpec

__all__ = ["TaskRegistry"]

logger = get_logger(__name__)

#: Attribute read by register_many to override the collection key.
TASK_NAME_ATTR = "task_name"

#: Attribute read by register_many for the dependency list.
DEPENDENCIES_ATTR = "dependencies"


class TaskRegistry:
    """Registry of named tasks and their declared dependencies.

    Re-registering a name replaces the previous entry; the name keeps its
    original position in ``list_names()``.

    Attributes:
        _tasks: Internal dict mapping task names to Task objects.

    Example:
        ```python
        registry = TaskRegistry()

        def compile(options, engine, results):
            ...

        # These two calls register the same task: 'compile' depending on 'clean'
        registry.register(compile, ["clean"])
        registry.register(compile, "compile", ["clean"])

        registry.can_run("compile")  # True
        registry.list_names()        # ['compile']
        ```
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._tasks: dict[str, Task] = {}

    def register(
        self,
        runnable: Any,
        name_or_dependencies: str | Sequence[DependencyEntry] | None = None,
        dependencies: Iterable[DependencyEntry] | None = None,
    ) -> Any:
        """Register a runnable as a task.

        Supported call shapes:
            register(fn)                      # name from fn.__name__
            register(fn, ["dep", ...])        # name from fn.__name__
            register(fn, "name")
            register(fn, "name", ["dep", ...])

        Args:
            runnable: The task body, ``(options, engine, results) -> value``.
            name_or_dependencies: Task name, or the dependency list when the
                name should be derived from the runnable.
            dependencies: Dependency list when a name is given.

        Returns:
            The runnable, so ``register`` also works as a bare decorator.

        Raises:
            ConfigurationError: If the runnable is not callable, has no
                derivable name and none was given, the name is not a
                string, or a dependency entry is malformed.
        """
        if isinstance(name_or_dependencies, Sequence) and not isinstance(
            name_or_dependencies, str
        ):
            spec = TaskSpec.with_dependencies(runnable, name_or_dependencies)
        elif name_or_dependencies is not None:
            spec = TaskSpec.named(name_or_dependencies, runnable, dependencies)
        elif dependencies:
            spec = TaskSpec.with_dependencies(runnable, dependencies)
        else:
            spec = TaskSpec.of(runnable)

        self.register_spec(spec)
        return runnable

    def register_spec(self, spec: TaskSpec) -> Task:
        """Register a prepared TaskSpec, replacing any task with the same name.

        Args:
            spec: The registration request.

        Returns:
            The stored Task.
        """
        task = spec.to_task()
        replaced = spec.name in self._tasks
        self._tasks[spec.name] = task
        logger.debug(
            "task_registered",
            task=spec.name,
            dependencies=list(task.dependency_names),
            replaced=replaced,
        )
        return task

    def register_many(
        self,
        collection: Mapping[Any, Any] | Sequence[Any],
    ) -> Self:
        """Register every callable entry of a mapping or sequence.

        For each callable entry the task name is its ``task_name`` attribute
        when set, otherwise the mapping key (or the sequence index as a
        string). Its dependencies are its ``dependencies`` attribute when
        that is a non-string sequence, otherwise none. Non-callable entries are
        skipped.

        Args:
            collection: Mapping of key to candidate, or a sequence of
                candidates.

        Returns:
            This registry, for chaining.
        """
        if isinstance(collection, Mapping):
            items: Iterable[tuple[Any, Any]] = collection.items()
        else:
            items = ((str(index), entry) for index, entry in enumerate(collection))

        for key, candidate in items:
            if not callable(candidate):
                continue
            name = getattr(candidate, TASK_NAME_ATTR, None) or str(key)
            deps = getattr(candidate, DEPENDENCIES_ATTR, None)
            if not isinstance(deps, Sequence) or isinstance(deps, str):
                deps = []
            self.register_spec(TaskSpec.named(name, candidate, deps))
        return self

    def add(
        self,
        target: Any,
        name_or_dependencies: str | Sequence[DependencyEntry] | None = None,
        dependencies: Iterable[DependencyEntry] | None = None,
    ) -> Self:
        """Register a single runnable or a whole collection of runnables.

        A lone mapping, list or tuple argument is handed to
        ``register_many``; anything else goes to ``register``.

        Returns:
            This registry, for chaining.
        """
        is_collection = isinstance(target, (Mapping, list, tuple))
        if is_collection and name_or_dependencies is None and dependencies is None:
            return self.register_many(target)
        self.register(target, name_or_dependencies, dependencies)
        return self

    def get(self, name: str) -> Task:
        """Look up a task by name.

        Raises:
            TaskNotFoundError: If no task with this name exists.
        """
        task = self._tasks.get(name)
        if task is None:
            raise TaskNotFoundError(name)
        return task

    def lookup(self, name: str) -> Task | None:
        """Return the current task registered under ``name``, or None."""
        return self._tasks.get(name)

    def can_run(self, name: str) -> bool:
        """Check whether a task is registered under ``name``."""
        return name in self._tasks

    def list_names(self) -> list[str]:
        """List registered task names in registration order."""
        return list(self._tasks)

    def clear(self) -> None:
        """Remove every registered task.

        Primarily useful for testing.
        """
        self._tasks.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._tasks
