from __future__ import annotations

from pathlib import Path

from taskengine.exceptions.base import TaskEngineError


class TaskfileError(TaskEngineError):
    """Raised when a taskfile or an options module cannot be loaded.

    Attributes:
        message: Human-readable error message.
        path: The file path or module identifier that failed to load.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the TaskfileError.

        Args:
            message: Human-readable error message.
            path: Optional file path or module identifier.
        """
        self.path = path
        super().__init__(message)
