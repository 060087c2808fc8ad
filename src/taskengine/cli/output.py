"""Output formatting helpers for the taskengine CLI."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "format_error",
    "format_completion",
    "format_task_list",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Formatted error string.

    Example:
        >>> print(format_error(
        ...     "Task 'biuld' does not exist",
        ...     suggestion="Available tasks: build, clean",
        ... ))
        Error: Task 'biuld' does not exist
        Suggestion: Available tasks: build, clean
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_completion(task_name: str, seconds: float) -> str:
    """Format the message printed after a task finished successfully.

    Example:
        >>> format_completion("build", 1.234)
        "Task 'build' completed in 1.23 seconds"
    """
    return f"Task '{task_name}' completed in {seconds:.2f} seconds"


def format_task_list(names: Sequence[str]) -> str:
    """Format registered task names, one per line."""
    if not names:
        return "No tasks registered"
    return "\n".join(names)
