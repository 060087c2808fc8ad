from __future__ import annotations

from taskengine.exceptions.base import TaskEngineError


class ConfigurationError(TaskEngineError):
    """Raised synchronously when a task cannot be registered.

    A registration fails when the runnable is not callable, when it has no
    derivable name and none was supplied, or when a dependency entry has a
    shape that cannot be turned into a dependency spec.

    Attributes:
        message: Human-readable error message.
        task_name: Name of the task being registered (if known).

    Example:
        ```python
        raise ConfigurationError(
            "Task function must be a named function or "
            "an explicit task name must be passed in"
        )
        ```
    """

    def __init__(self, message: str, task_name: str | None = None) -> None:
        """Initialize the ConfigurationError.

        Args:
            message: Human-readable error message.
            task_name: Optional name of the task being registered.
        """
        self.task_name = task_name
        super().__init__(message)
