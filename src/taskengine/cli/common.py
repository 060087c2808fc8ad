from __future__ import annotations

import contextlib
from collections.abc import Generator

import click

from taskengine.cli.context import ExitCode
from taskengine.cli.output import format_error
from taskengine.exceptions import (
    DependencyNotFoundError,
    SettingsError,
    TaskEngineError,
    TaskfileError,
)
from taskengine.logging import get_logger


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for CLI error handling.

    Handles:
    - KeyboardInterrupt: Exit with code 130
    - TaskfileError / SettingsError: Format error with the offending path/field
    - TaskEngineError: Format error with message
    - Any other exception (a failing task body): Log and print it, exit 1

    Example:
        >>> with cli_error_handler():
        >>>     asyncio.run(engine.run("build"))
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except TaskfileError as e:
        error_msg = format_error(
            e.message,
            details=[f"Path: {e.path}"] if e.path else None,
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except SettingsError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details or None), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except DependencyNotFoundError as e:
        error_msg = format_error(
            e.message,
            suggestion=f"Register '{e.dependency_name}' or remove it from "
            f"the dependencies of '{e.task_name}'",
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except TaskEngineError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.debug("task_error", exc_info=True)
        message = str(e) or type(e).__name__
        click.echo(f"Error: {message}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e
