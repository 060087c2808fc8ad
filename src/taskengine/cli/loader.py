"""Loading of taskfiles, options modules and ``@module`` option values.

Module identifiers follow these rules:
- ``./x.py``, ``../x.py`` or any ``*.py`` path: executed as a Python file,
  resolved against the working directory
- ``*.json``, ``*.yaml``, ``*.yml``: parsed as data
- anything else: imported with ``importlib.import_module``
"""

from __future__ import annotations

import importlib
import importlib.util
import json
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any

import yaml

from taskengine.engine import TaskEngine, get_engine
from taskengine.exceptions import TaskEngineError, TaskfileError
from taskengine.logging import get_logger

__all__ = [
    "load_module",
    "load_options",
    "load_taskfile",
]

logger = get_logger(__name__)

DATA_SUFFIXES = frozenset({".json", ".yaml", ".yml"})

#: Attribute a taskfile may define to provide its own engine.
TASKFILE_ENGINE_ATTR = "engine"

#: Attribute an options module may define to provide the whole mapping.
OPTIONS_ATTR = "options"


def _is_path_identifier(module_id: str) -> bool:
    return module_id.startswith(".") or Path(module_id).suffix in (
        DATA_SUFFIXES | {".py"}
    )


def _load_data_file(path: Path) -> Any:
    content = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(content)
    return yaml.safe_load(content)


def _exec_python_file(path: Path) -> ModuleType:
    """Execute a Python file as a fresh module.

    The file's directory is on ``sys.path`` while it executes so it can
    import its siblings; ``sys.path`` is restored afterwards.
    """
    module_name = f"_taskengine_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise TaskfileError(f"Cannot load Python file {path}", path=path)

    saved_path = list(sys.path)
    sys.path.insert(0, str(path.parent))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    finally:
        sys.path[:] = saved_path
    return module


def load_module(module_id: str, base_dir: Path | None = None) -> Any:
    """Load the value identified by ``module_id``.

    Args:
        module_id: File path or importable module name.
        base_dir: Directory relative paths are resolved against. Defaults to
            the working directory.

    Returns:
        The loaded module, or the parsed data for JSON/YAML files.

    Raises:
        TaskfileError: If the file or module cannot be found or loaded.
        TaskEngineError: Raised by the loaded code itself (e.g. a bad task
            registration), unchanged.
    """
    try:
        if _is_path_identifier(module_id):
            path = ((base_dir or Path.cwd()) / module_id).resolve()
            if not path.is_file():
                raise TaskfileError(f"File not found: {module_id}", path=path)
            logger.debug("loading_file", path=str(path))
            if path.suffix in DATA_SUFFIXES:
                return _load_data_file(path)
            return _exec_python_file(path)

        logger.debug("importing_module", module=module_id)
        return importlib.import_module(module_id)
    except TaskEngineError:
        raise
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TaskfileError(
            f"Invalid data in '{module_id}': {e}", path=module_id
        ) from e
    except ImportError as e:
        raise TaskfileError(
            f"Cannot import module '{module_id}': {e}", path=module_id
        ) from e
    except Exception as e:
        raise TaskfileError(
            f"Failed to load '{module_id}': {e}", path=module_id
        ) from e


def load_options(module_id: str, base_dir: Path | None = None) -> dict[str, Any]:
    """Load an options mapping from a module identifier.

    A Python module provides its ``options`` attribute when it has one,
    otherwise all of its public attributes that are not modules.

    Raises:
        TaskfileError: If loading fails or the value is not a mapping.
    """
    value = load_module(module_id, base_dir)

    if isinstance(value, ModuleType):
        if hasattr(value, OPTIONS_ATTR):
            value = getattr(value, OPTIONS_ATTR)
        else:
            value = {
                key: attr
                for key, attr in vars(value).items()
                if not key.startswith("_") and not isinstance(attr, ModuleType)
            }

    if not isinstance(value, Mapping):
        raise TaskfileError(
            f"Options from '{module_id}' must be a mapping, "
            f"got {type(value).__name__}",
            path=module_id,
        )
    return dict(value)


def load_taskfile(path: Path) -> TaskEngine:
    """Execute a taskfile and return the engine its tasks live in.

    The taskfile either defines an ``engine`` attribute holding a TaskEngine,
    or registers its tasks into the process-wide ``get_engine()`` instance.

    Raises:
        TaskfileError: If the file is missing, fails to execute, or its
            ``engine`` attribute is not a TaskEngine.
    """
    path = path if path.is_absolute() else Path.cwd() / path
    if not path.is_file():
        raise TaskfileError(f"Taskfile not found: {path}", path=path)

    try:
        module = _exec_python_file(path.resolve())
    except TaskEngineError:
        raise
    except Exception as e:
        raise TaskfileError(f"Failed to load taskfile: {e}", path=path) from e

    engine = getattr(module, TASKFILE_ENGINE_ATTR, None)
    if engine is None:
        return get_engine()
    if not isinstance(engine, TaskEngine):
        raise TaskfileError(
            f"Taskfile attribute '{TASKFILE_ENGINE_ATTR}' must be a TaskEngine, "
            f"got {type(engine).__name__}",
            path=path,
        )
    return engine
