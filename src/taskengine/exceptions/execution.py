from __future__ import annotations

from taskengine.exceptions.base import TaskEngineError


class TaskNotFoundError(TaskEngineError):
    """Raised when a task name passed to run/run_direct is not registered.

    Attributes:
        message: Human-readable error message.
        task_name: The name that could not be found.
    """

    def __init__(self, task_name: str) -> None:
        """Initialize the TaskNotFoundError.

        Args:
            task_name: The name that could not be found.
        """
        self.task_name = task_name
        super().__init__(f"Task '{task_name}' does not exist")


class DependencyNotFoundError(TaskEngineError):
    """Raised when a declared dependency is not registered at resolution time.

    Attributes:
        message: Human-readable error message.
        task_name: The dependent task whose dependency list was being walked.
        dependency_name: The dependency name that could not be found.
    """

    def __init__(self, task_name: str, dependency_name: str) -> None:
        """Initialize the DependencyNotFoundError.

        Args:
            task_name: The dependent task name.
            dependency_name: The missing dependency name.
        """
        self.task_name = task_name
        self.dependency_name = dependency_name
        super().__init__(
            f"Dependent task '{dependency_name}' of task '{task_name}' not found"
        )


class CyclicDependencyError(TaskEngineError):
    """Raised when a resolution reaches a task that is already being resolved.

    Attributes:
        message: Human-readable error message.
        task_name: The task that closed the cycle.
        path: Resolution path from the root task to the repeated task.
    """

    def __init__(self, task_name: str, path: tuple[str, ...]) -> None:
        """Initialize the CyclicDependencyError.

        Args:
            task_name: The task that closed the cycle.
            path: Names on the resolution path, root first, ending with
                ``task_name``.
        """
        self.task_name = task_name
        self.path = path
        super().__init__(
            f"Circular dependency detected involving '{task_name}': "
            f"{' -> '.join(path)}"
        )
