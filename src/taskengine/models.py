"""Dataclass models for task registration and resolution.

This module defines the core data structures of the engine:
- DependencySpec: One edge of a task's dependency list, with an optional
  option override scoped to that dependency's subtree
- Task: A registered runnable together with its normalized dependencies
- TaskSpec: The canonical registration request, built through one
  constructor per registration shape
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

from taskengine.exceptions import ConfigurationError

if TYPE_CHECKING:
    from taskengine.engine import TaskEngine

__all__ = [
    "DependencyEntry",
    "DependencySpec",
    "Runnable",
    "Task",
    "TaskSpec",
    "derive_task_name",
    "normalize_dependencies",
]

#: Contract of a task body: ``(options, engine, results) -> value | awaitable``.
Runnable: TypeAlias = Callable[
    [Mapping[str, Any], "TaskEngine", list[Any]], "Any | Awaitable[Any]"
]

#: Accepted shapes for one entry of a dependency list.
DependencyEntry: TypeAlias = "str | Mapping[str, Any] | DependencySpec"

_ANONYMOUS_NAMES = frozenset({"", "<lambda>"})


@dataclass(frozen=True, slots=True)
class DependencySpec:
    """A single dependency edge.

    Attributes:
        task_name: Name of the task this edge points to. Only checked for
            existence when the dependency is resolved.
        options: Optional override shallow-merged over the inherited options,
            visible only while resolving this dependency and its descendants.

    Example:
        >>> DependencySpec.coerce("lint")
        DependencySpec(task_name='lint', options=None)
        >>> DependencySpec.coerce({"task": "greet", "options": {"age": 34}})
        DependencySpec(task_name='greet', options=mappingproxy({'age': 34}))
    """

    task_name: str
    options: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.options is not None and not isinstance(self.options, MappingProxyType):
            # Read-only copy so the declaring code can't change it later
            object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @classmethod
    def coerce(cls, entry: DependencyEntry) -> DependencySpec:
        """Build a DependencySpec from any accepted dependency shape.

        Args:
            entry: A bare task name, a ``{"task": ..., "options": ...}``
                mapping, or an existing DependencySpec.

        Returns:
            The normalized DependencySpec.

        Raises:
            ConfigurationError: If the entry has an unsupported shape.
        """
        if isinstance(entry, DependencySpec):
            return entry
        if isinstance(entry, str):
            return cls(task_name=entry)
        if isinstance(entry, Mapping):
            task_name = entry.get("task")
            if not isinstance(task_name, str) or not task_name:
                raise ConfigurationError(
                    f"Dependency mapping must name a task under 'task', got {entry!r}"
                )
            options = entry.get("options")
            if options is not None and not isinstance(options, Mapping):
                raise ConfigurationError(
                    f"Options override for dependency '{task_name}' must be a "
                    f"mapping, got {type(options).__name__}"
                )
            return cls(task_name=task_name, options=options)
        raise ConfigurationError(
            f"Invalid dependency entry {entry!r}: expected a task name, "
            "a mapping with a 'task' key, or a DependencySpec"
        )

    def merge_options(self, inherited: Mapping[str, Any]) -> dict[str, Any]:
        """Return a new options dict with this edge's override applied."""
        if self.options is None:
            return dict(inherited)
        return {**inherited, **self.options}


def normalize_dependencies(
    dependencies: Iterable[DependencyEntry] | None,
) -> tuple[DependencySpec, ...]:
    """Normalize a declared dependency list into DependencySpec values.

    Raises:
        ConfigurationError: If the list itself or any entry is malformed.
    """
    if dependencies is None:
        return ()
    if isinstance(dependencies, (str, Mapping)):
        raise ConfigurationError(
            f"Dependencies must be a list or tuple, got {type(dependencies).__name__}"
        )
    return tuple(DependencySpec.coerce(entry) for entry in dependencies)


def derive_task_name(runnable: Any) -> str | None:
    """Return the declared identifier of a runnable, if it has a usable one."""
    name = getattr(runnable, "__name__", None)
    if not isinstance(name, str) or name in _ANONYMOUS_NAMES:
        return None
    return name


@dataclass(frozen=True, slots=True)
class Task:
    """A registered unit of work.

    Attributes:
        name: Unique key within a registry.
        runnable: The task body.
        dependencies: Normalized dependency list; order fixes both execution
            sequence and result positions.
    """

    name: str
    runnable: Runnable
    dependencies: tuple[DependencySpec, ...] = ()

    @property
    def dependency_names(self) -> tuple[str, ...]:
        return tuple(dep.task_name for dep in self.dependencies)


@dataclass(frozen=True, slots=True)
class TaskSpec:
    """A registration request: which runnable, under which name, with what deps.

    Build instances through the constructor matching the call shape instead
    of passing positional arguments of varying types.

    Attributes:
        runnable: The task body.
        name: The registry key.
        dependencies: Normalized dependency list.

    Example:
        >>> async def build(options, engine, results): ...
        >>> TaskSpec.of(build).name
        'build'
        >>> TaskSpec.named("release", build, ["build"]).to_task().dependency_names
        ('build',)
    """

    runnable: Runnable
    name: str
    dependencies: tuple[DependencySpec, ...] = field(default_factory=tuple)

    @classmethod
    def named(
        cls,
        name: str | None,
        runnable: Any,
        dependencies: Iterable[DependencyEntry] | None = None,
    ) -> TaskSpec:
        """Spec with an explicit name; falls back to the runnable's name if empty.

        Raises:
            ConfigurationError: If ``runnable`` is not callable, or no name was
                given and none can be derived, or the name is not a string.
        """
        if not callable(runnable):
            raise ConfigurationError(
                f"Task must be a function, got {type(runnable).__name__}",
                task_name=name or None,
            )
        if name is not None and not isinstance(name, str):
            raise ConfigurationError(
                f"Task name must be a string, got {type(name).__name__}"
            )
        task_name = name or derive_task_name(runnable)
        if not task_name:
            raise ConfigurationError(
                "Task function must be a named function or "
                "an explicit task name must be passed in"
            )
        return cls(
            runnable=runnable,
            name=task_name,
            dependencies=normalize_dependencies(dependencies),
        )

    @classmethod
    def of(cls, runnable: Any) -> TaskSpec:
        """Spec named after the runnable, with no dependencies."""
        return cls.named(None, runnable)

    @classmethod
    def with_dependencies(
        cls,
        runnable: Any,
        dependencies: Iterable[DependencyEntry],
    ) -> TaskSpec:
        """Spec named after the runnable, with the given dependencies."""
        return cls.named(None, runnable, dependencies)

    def to_task(self) -> Task:
        return Task(
            name=self.name,
            runnable=self.runnable,
            dependencies=self.dependencies,
        )
