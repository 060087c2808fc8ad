"""Decorator for declaring task metadata on plain functions.

``task`` attaches a ``task_name`` and/or ``dependencies`` attribute to a
function so that ``TaskRegistry.register_many`` (and ``add`` with a
collection) picks them up. It does not register anything by itself; use
``TaskEngine.task`` for that.

Example:
    ```python
    from taskengine import TaskEngine, task

    @task(name="build", dependencies=["clean"])
    async def build(options, engine, results):
        ...

    @task(name="clean")
    def remove_artifacts(options, engine, results):
        ...

    engine = TaskEngine().add([build, remove_artifacts])
    engine.list_names()  # ['build', 'clean']
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar, overload

from taskengine.exceptions import ConfigurationError
from taskengine.models import DependencyEntry, derive_task_name
from taskengine.registry import DEPENDENCIES_ATTR, TASK_NAME_ATTR

__all__ = ["task"]

F = TypeVar("F", bound=Callable[..., Any])


def _annotate(
    fn: F,
    name: str | None,
    dependencies: Iterable[DependencyEntry] | None,
    derive_name: bool = False,
) -> F:
    if not callable(fn):
        raise ConfigurationError(
            f"Task must be a function, got {type(fn).__name__}", task_name=name
        )
    if dependencies is not None:
        if isinstance(dependencies, str):
            raise ConfigurationError(
                "Dependencies must be a list or tuple, got str", task_name=name
            )
        setattr(fn, DEPENDENCIES_ATTR, list(dependencies))
    task_name = name or (derive_task_name(fn) if derive_name else None)
    if task_name:
        setattr(fn, TASK_NAME_ATTR, task_name)
    return fn


@overload
def task(fn: F, /) -> F: ...


@overload
def task(
    *,
    name: str | None = None,
    dependencies: Iterable[DependencyEntry] | None = None,
) -> Callable[[F], F]: ...


def task(
    fn: F | None = None,
    /,
    *,
    name: str | None = None,
    dependencies: Iterable[DependencyEntry] | None = None,
) -> F | Callable[[F], F]:
    """Attach task metadata to a function.

    Used bare (``@task``), the function's own name becomes its task name.
    Used with keywords (``@task(name=..., dependencies=[...])``), only an
    explicit ``name`` is attached, so the collection key applies otherwise.

    Args:
        fn: Function to annotate when used bare.
        name: Task name to register under instead of the collection key.
        dependencies: Dependency list (names, ``{"task", "options"}``
            mappings, or DependencySpec values).

    Returns:
        The annotated function, or a decorator when called with keywords.
    """
    if fn is not None:
        return _annotate(fn, name, dependencies, derive_name=True)

    def decorator(target: F) -> F:
        return _annotate(target, name, dependencies)

    return decorator
