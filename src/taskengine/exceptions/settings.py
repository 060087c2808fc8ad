from __future__ import annotations

from typing import Any

from taskengine.exceptions.base import TaskEngineError


class SettingsError(TaskEngineError):
    """Exception for settings loading, parsing, and validation errors.

    Raised when taskengine settings cannot be loaded, parsed, or validated.
    This includes YAML parsing failures, Pydantic validation errors, and
    invalid environment variable values.

    Attributes:
        message: Human-readable error message describing the settings issue.
        field: Optional field name that caused the error (e.g., "taskfile").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        # YAML parsing failure
        raise SettingsError(
            "Failed to parse taskengine.yaml: invalid YAML syntax at line 10"
        )

        # Pydantic validation failure
        raise SettingsError(
            "Invalid configuration value",
            field="verbosity",
            value="loud",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the SettingsError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
