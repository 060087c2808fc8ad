"""CLI entry point for taskengine.

Usage:
    taskengine [OPTIONS] [TASK] [ARGS]...

    taskengine build --target=release --verbose
    taskengine :build ./release_options.py   # run 'build' without dependencies
    taskengine --list
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

import click
from dotenv import load_dotenv

from taskengine import __version__
from taskengine.cli.common import cli_error_handler
from taskengine.cli.console import console
from taskengine.cli.context import ExitCode
from taskengine.cli.loader import load_options, load_taskfile
from taskengine.cli.options import is_flag, read_options
from taskengine.cli.output import format_completion, format_error, format_task_list
from taskengine.config import TaskEngineConfig, load_config
from taskengine.engine import TaskEngine, init_engine
from taskengine.exceptions import SettingsError, TaskNotFoundError
from taskengine.logging import configure_logging, get_logger

#: Prefix on the task name that skips dependency resolution.
DIRECT_PREFIX = ":"

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _resolve_log_level(config: TaskEngineConfig, verbose: int, quiet: bool) -> int:
    # Priority: quiet > verbose > config
    if quiet:
        return logging.ERROR
    if verbose > 0:
        return logging.INFO if verbose == 1 else logging.DEBUG
    return _VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)


def _split_task_name(raw_name: str) -> tuple[str, bool]:
    """Return the task name and whether dependencies should be skipped."""
    if raw_name.startswith(DIRECT_PREFIX):
        return raw_name[len(DIRECT_PREFIX) :], True
    return raw_name, False


def _available_tasks_hint(engine: TaskEngine) -> str:
    names = engine.list_names()
    if not names:
        return "No tasks are registered; check the taskfile"
    return f"Available tasks: {', '.join(names)}"


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    }
)
@click.version_option(version=__version__, prog_name="taskengine")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (overrides ./taskengine.yaml).",
)
@click.option(
    "-f",
    "--taskfile",
    type=click.Path(path_type=Path),
    default=None,
    help="Python file that registers the tasks (default: taskfile.py).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.option(
    "-l",
    "--list",
    "list_tasks",
    is_flag=True,
    default=False,
    help="List registered tasks and exit.",
)
@click.argument("task_name", required=False)
@click.argument("task_args", nargs=-1, type=click.UNPROCESSED)
def cli(
    config_file: Path | None,
    taskfile: Path | None,
    verbose: int,
    quiet: bool,
    list_tasks: bool,
    task_name: str | None,
    task_args: tuple[str, ...],
) -> None:
    """taskengine - run a task and its dependencies from a taskfile.

    TASK is the name of a registered task; prefix it with ':' to run it
    without its dependencies. ARGS are either a single options module
    (Python file, JSON/YAML file or importable module) or --key value pairs.
    """
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    try:
        config = load_config(config_file)
    except SettingsError as e:
        error_parts = [e.message]
        if e.field:
            error_parts.append(f"Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"Value: {e.value}")
        click.echo(format_error(error_parts[0], details=error_parts[1:]), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    configure_logging(level=_resolve_log_level(config, verbose, quiet))
    logger = get_logger(__name__)

    with cli_error_handler():
        init_engine(TaskEngine(detect_cycles=config.detect_cycles))
        engine = load_taskfile(taskfile or config.taskfile)

        if list_tasks:
            click.echo(format_task_list(engine.list_names()))
            return

        if task_name is not None and is_flag(task_name):
            # Only task options were given: run the default task with them
            task_args = (task_name, *task_args)
            task_name = None

        name, direct = _split_task_name(task_name or config.default_task)

        if task_args and not is_flag(task_args[0]):
            if len(task_args) > 1:
                logger.warning("extra_arguments_ignored", arguments=task_args[1:])
            options = load_options(task_args[0])
        else:
            options = read_options(task_args)

        logger.info("running_task", task=name, direct=direct)
        runner = engine.run_direct if direct else engine.run
        start_time = time.monotonic()
        try:
            asyncio.run(runner(name, options))
        except TaskNotFoundError as e:
            if e.task_name != name:
                raise
            click.echo(
                format_error(e.message, suggestion=_available_tasks_hint(engine)),
                err=True,
            )
            raise SystemExit(ExitCode.FAILURE) from e

        if not quiet:
            console.print(format_completion(name, time.monotonic() - start_time))


if __name__ == "__main__":
    cli()
