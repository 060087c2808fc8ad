"""Shared fixtures for CLI tests.

Common fixtures available from the parent conftest.py:
- temp_dir: Temporary directory for test files
- clean_env: Clean environment without TASKENGINE_ vars
- sample_taskfile: Taskfile source registering a small dependency chain
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def write_file(temp_dir: Path):
    """Return a helper that writes ``content`` to ``temp_dir / name``."""

    def _write(name: str, content: str) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
