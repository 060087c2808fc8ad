"""taskengine - register named tasks and run them with their dependencies.

Example:
    ```python
    import asyncio

    from taskengine import TaskEngine

    engine = TaskEngine()

    def clean(options, engine, results):
        return "clean"

    async def build(options, engine, results):
        return f"{results[0]} build for {options['target']}"

    engine.register(clean)
    engine.register(build, ["clean"])

    asyncio.run(engine.run("build", {"target": "release"}))
    # 'clean build for release'
    ```
"""

from __future__ import annotations

from taskengine.decorators import task
from taskengine.engine import TaskEngine, get_engine, init_engine, reset_engine
from taskengine.exceptions import (
    ConfigurationError,
    CyclicDependencyError,
    DependencyNotFoundError,
    TaskEngineError,
    TaskNotFoundError,
)
from taskengine.models import DependencySpec, Task, TaskSpec
from taskengine.registry import TaskRegistry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "TaskEngine",
    "TaskRegistry",
    "get_engine",
    "init_engine",
    "reset_engine",
    "task",
    # Models
    "DependencySpec",
    "Task",
    "TaskSpec",
    # Errors
    "ConfigurationError",
    "CyclicDependencyError",
    "DependencyNotFoundError",
    "TaskEngineError",
    "TaskNotFoundError",
]
