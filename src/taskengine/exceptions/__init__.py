"""taskengine exception hierarchy.

All exceptions can be imported from this package:
    from taskengine.exceptions import TaskNotFoundError, ConfigurationError
"""

from __future__ import annotations

# Base exception
from taskengine.exceptions.base import TaskEngineError

# Loading exceptions (taskfile, options modules)
from taskengine.exceptions.cli import TaskfileError

# Execution-time exceptions
from taskengine.exceptions.execution import (
    CyclicDependencyError,
    DependencyNotFoundError,
    TaskNotFoundError,
)

# Registration exceptions
from taskengine.exceptions.registration import ConfigurationError

# Settings exceptions
from taskengine.exceptions.settings import SettingsError

__all__ = [
    # Base
    "TaskEngineError",
    # Registration
    "ConfigurationError",
    # Execution
    "CyclicDependencyError",
    "DependencyNotFoundError",
    "TaskNotFoundError",
    # Settings
    "SettingsError",
    # Loading
    "TaskfileError",
]
