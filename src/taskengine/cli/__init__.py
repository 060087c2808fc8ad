"""Command-line support for taskengine.

The modules in this package turn command-line arguments into the plain
values the engine consumes (a task name and an options mapping) and turn
engine outcomes back into console output and exit codes.
"""

from __future__ import annotations
