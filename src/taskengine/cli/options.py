"""Conversion of command-line arguments into a task options mapping.

Supported argument forms:
    --key=value          single value
    --flag               True (when followed by another flag or nothing)
    --key v1 v2          list of values (a single value stays scalar)
    --key v1 --key v2    repeated keys accumulate into a list

Values are then converted by ``convert_value``:
    null / Null          None
    true / True          True
    false / False        False
    42, -1.5, 2e10       int or float
    @module              the loaded module (see ``taskengine.cli.loader``)
    anything else        the string itself
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from taskengine.cli.loader import load_module

__all__ = [
    "convert_value",
    "is_flag",
    "read_options",
]

_NUMBER_RE = re.compile(r"^-?(\d+|(\d*\.\d+))([eE][+\-]?\d+)?$")
_INT_RE = re.compile(r"^-?\d+$")

_CONSTANTS: dict[str, Any] = {
    "null": None,
    "Null": None,
    "true": True,
    "True": True,
    "false": False,
    "False": False,
}

MODULE_PREFIX = "@"


def is_flag(arg: str) -> bool:
    """Whether ``arg`` names an option (``-x``/``--x``) rather than a value.

    Negative numbers are values, not flags.
    """
    return arg.startswith("-") and not _NUMBER_RE.match(arg)


def convert_value(value: Any, base_dir: Path | None = None) -> Any:
    """Convert a raw command-line value into a typed Python value.

    Lists and mappings are converted element by element; non-string scalars
    are returned unchanged.
    """
    if isinstance(value, str):
        if value in _CONSTANTS:
            return _CONSTANTS[value]
        if _NUMBER_RE.match(value):
            return int(value) if _INT_RE.match(value) else float(value)
        if value.startswith(MODULE_PREFIX) and len(value) > 1:
            return load_module(value[len(MODULE_PREFIX) :], base_dir)
        return value
    if isinstance(value, list):
        return [convert_value(item, base_dir) for item in value]
    if isinstance(value, Mapping):
        return {key: convert_value(item, base_dir) for key, item in value.items()}
    return value


def read_options(args: Sequence[str], base_dir: Path | None = None) -> dict[str, Any]:
    """Build an options mapping from command-line arguments.

    Args:
        args: Arguments following the task name.
        base_dir: Directory ``@./file`` references are resolved against.

    Returns:
        The converted options.

    Example:
        >>> read_options(["--env=prod", "--dry-run", "--targets", "a", "b"])
        {'env': 'prod', 'dry-run': True, 'targets': ['a', 'b']}
    """
    raw: dict[str, Any] = {}

    for arg in args:
        if is_flag(arg) and "=" in arg:
            key, value = arg.split("=", 1)
            raw[key.strip().lstrip("-")] = value.strip()

    remaining = [arg for arg in args if not (is_flag(arg) and "=" in arg)]
    index = 0
    while index < len(remaining):
        key = remaining[index].lstrip("-")
        index += 1

        values: list[str] = []
        while index < len(remaining) and not is_flag(remaining[index]):
            values.append(remaining[index])
            index += 1

        if not values:
            raw[key] = True
        elif key in raw and raw[key] is not True:
            existing = raw[key]
            if not isinstance(existing, list):
                existing = [existing]
            raw[key] = [*existing, *values]
        else:
            raw[key] = values[0] if len(values) == 1 else values

    return {key: convert_value(value, base_dir) for key, value in raw.items()}
