from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test environment.

    Runs automatically for all tests so log output goes to stderr at WARNING
    level and does not mix with stdout assertions.
    """
    from taskengine.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture(autouse=True)
def isolated_engine() -> Generator[None, None, None]:
    """Discard the process-wide engine before and after each test."""
    from taskengine.engine import reset_engine

    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory so tests that
    use os.chdir() don't affect other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all TASKENGINE_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("TASKENGINE_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_taskfile() -> str:
    """Return taskfile content registering a small dependency chain."""
    return '''
from taskengine import get_engine

engine = get_engine()


@engine.task()
def clean(options, engine, results):
    print("clean")
    return "cleaned"


@engine.task(dependencies=["clean"])
def build(options, engine, results):
    print(f"build target={options.get('target')} deps={results}")
    return "built"


@engine.task(name="default", dependencies=["build"])
def everything(options, engine, results):
    print("default")


@engine.task()
def explode(options, engine, results):
    raise RuntimeError("boom")


@engine.task(dependencies=["missing"])
def broken(options, engine, results):
    print("broken ran")
'''
