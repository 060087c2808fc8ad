from __future__ import annotations


class TaskEngineError(Exception):
    """Base exception class for all taskengine-specific errors.

    This is the root of the taskengine exception hierarchy. Errors raised by
    the engine itself (registration problems, unknown task names, missing
    dependencies) inherit from this class. Exceptions raised by task runnables
    are never wrapped and therefore do not inherit from it.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            await engine.run("build", {"target": "release"})
        except TaskEngineError as e:
            # Catch engine errors at the CLI boundary
            logger.error(f"taskengine error: {e.message}")
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the TaskEngineError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
