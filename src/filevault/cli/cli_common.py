"""Common CLI utilities: JSON output, stable exit codes and error mapping."""

from __future__ import annotations

import functools
import json
import traceback
from enum import IntEnum
from pathlib import Path
from typing import Any, Callable

import click

from ..core.config import Config, ConfigError, load_config
from ..core.errors import (
    ContainerCorruptError,
    ContainerMissingError,
    ContainerReadError,
    ContainerWriteError,
    DuplicateKeyError,
    InvalidFileNameError,
    RecordNotFoundError,
)
from ..observability.loguru_config import configure_loguru, get_logger

log = get_logger("cli")


class ExitCode(IntEnum):
    """Stable exit codes for CLI commands."""

    SUCCESS = 0  # Successful execution
    INVALID_INPUT = 1  # Path without name or extension
    USAGE_ERROR = 2  # Bad command line (raised by click)
    DUPLICATE_KEY = 3  # File already exists inside the vault
    NOT_FOUND = 4  # File does not exist inside the vault
    IO_ERROR = 5  # Source/export file or container read/write failed
    CONFIG_ERROR = 6  # Configuration error
    UNKNOWN_ERROR = 7  # Unknown/unexpected error
    VAULT_MISSING = 8  # No container in the working directory
    VAULT_CORRUPT = 9  # Container cannot be decoded


def exit_code_for(exc: BaseException) -> ExitCode:
    """Map an exception to its stable exit code."""
    if isinstance(exc, InvalidFileNameError):
        return ExitCode.INVALID_INPUT
    if isinstance(exc, DuplicateKeyError):
        return ExitCode.DUPLICATE_KEY
    if isinstance(exc, RecordNotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(exc, ContainerMissingError):
        return ExitCode.VAULT_MISSING
    if isinstance(exc, ContainerCorruptError):
        return ExitCode.VAULT_CORRUPT
    if isinstance(exc, ContainerReadError | ContainerWriteError | OSError):
        return ExitCode.IO_ERROR
    if isinstance(exc, ConfigError):
        return ExitCode.CONFIG_ERROR
    return ExitCode.UNKNOWN_ERROR


class CLIContext:
    """Per-invocation CLI state: output mode and loaded configuration."""

    def __init__(self, json_output: bool = False, verbose: bool = False) -> None:
        self.json_output = json_output
        self.verbose = verbose
        self.config: Config | None = None

    def setup(self) -> None:
        """Load configuration and configure logging.

        Raises
        ------
        ConfigError
            If the configuration is invalid
        """
        try:
            self.config = load_config()
            level = "DEBUG" if self.verbose else self.config.log_level
            log_file = self.config.log_file
        except ConfigError:
            configure_loguru(level="DEBUG" if self.verbose else "ERROR")
            raise

        configure_loguru(level=level, log_file=log_file)

    @property
    def container_path(self) -> Path:
        if self.config is None:
            raise RuntimeError("CLIContext.setup() has not been called")
        return self.config.container_path

    def echo(self, message: str) -> None:
        """Print a progress line (suppressed in JSON mode)."""
        if not self.json_output:
            click.echo(message)

    def output(
        self,
        data: Any,
        *,
        message: str | None = None,
        status: str = "success",
        error: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        """Output result in the selected format.

        Parameters
        ----------
        data
            Result data (JSON mode)
        message
            Human-readable text (human mode)
        status
            "success" or "error"
        error
            Error message if status is error
        meta
            Additional metadata (JSON mode)
        """
        if self.json_output:
            result: dict[str, Any] = {"status": status}

            if error:
                result["error"] = error
            if data is not None:
                result["data"] = data
            if meta:
                result["meta"] = meta

            click.echo(json.dumps(result, ensure_ascii=False, indent=2))
            return

        if status == "error":
            click.echo(f"error: {error}", err=True)
        elif message is not None:
            click.echo(message)


def cli_command(func: Callable[..., int]) -> Callable[..., int]:
    """Decorator adding --json/--verbose and injecting a ready CLIContext.

    Configuration errors are reported before the command body runs. Anything
    the command does not handle itself is reported with its exit code
    (UNKNOWN_ERROR for unexpected exceptions).
    """

    @click.option("--json", "json_output", is_flag=True, help="Output as JSON (machine-readable)")
    @click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr")
    @functools.wraps(func)
    def wrapper(json_output: bool, verbose: bool, *args: Any, **kwargs: Any) -> int:
        ctx = CLIContext(json_output=json_output, verbose=verbose)
        try:
            ctx.setup()
        except ConfigError as exc:
            return handle_cli_error(ctx, exc, func.__name__)

        try:
            return func(ctx, *args, **kwargs)
        except click.ClickException:
            raise
        except Exception as exc:
            return handle_cli_error(ctx, exc, func.__name__)

    return wrapper


def handle_cli_error(ctx: CLIContext, exc: BaseException, cmd: str, *, data: Any = None) -> int:
    """Report an error and return its exit code.

    Parameters
    ----------
    ctx
        CLI context
    exc
        Exception to report
    cmd
        Command name, for the log
    data
        Partial result to include in JSON output

    Returns
    -------
    int
        Exit code for the exception
    """
    exit_code = exit_code_for(exc)
    error_msg = str(exc)

    if exit_code is ExitCode.UNKNOWN_ERROR:
        log.opt(exception=exc).error("{} failed unexpectedly", cmd)
    else:
        log.warning("{} failed: {} (exit code {})", cmd, error_msg, int(exit_code))

    meta: dict[str, Any] = {"exit_code": int(exit_code), "error_type": type(exc).__name__}
    if ctx.verbose and ctx.json_output:
        meta["traceback"] = "".join(traceback.format_exception(exc))

    ctx.output(data, status="error", error=error_msg, meta=meta)
    return int(exit_code)


def handle_cli_success(ctx: CLIContext, data: Any, message: str | None = None) -> int:
    """Output a successful result and return exit code 0."""
    ctx.output(data, message=message, status="success")
    return int(ExitCode.SUCCESS)
