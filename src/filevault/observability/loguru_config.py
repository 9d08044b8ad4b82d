"""Loguru configuration with timing for container I/O.

This module provides centralized loguru configuration with:
- Console output on stderr (stdout is reserved for command output)
- Optional structured JSON log file
- Component-bound loggers
- A context manager for timing operations
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "configure_loguru",
    "get_logger",
    "timing_context",
]


def configure_loguru(
    *,
    level: str = "ERROR",
    log_file: Path | None = None,
    enable_console: bool = True,
) -> None:
    """Configure loguru sinks for one CLI invocation.

    Parameters
    ----------
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file
        Optional JSON-lines log file
    enable_console
        Enable stderr output

    Example
    -------
    >>> from filevault.observability.loguru_config import configure_loguru
    >>> configure_loguru(level="DEBUG")
    """
    # Remove default handler
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=None,
            backtrace=False,
            diagnose=False,
        )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{message}",
            level=level,
            serialize=True,  # JSON serialization
            backtrace=True,
            diagnose=False,
        )

    logger.configure(extra={"component": "filevault"})
    logger.debug("Loguru configured", level=level, log_file=str(log_file) if log_file else None)


def get_logger(component: str = "filevault") -> Any:
    """Get logger instance bound to a component (storage, cli)."""
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "filevault",
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Log START/END of an operation with its duration.

    Parameters
    ----------
    operation
        Name of the operation being timed
    component
        Component name for filtering logs
    **metadata
        Additional metadata to log

    Yields
    ------
    dict
        Context dictionary that can be updated with additional data

    Example
    -------
    >>> with timing_context("container.save", component="storage", path="vault.vault") as ctx:
    ...     ctx["bytes"] = write(data)
    """
    start_time_ns = time.perf_counter_ns()
    context: dict[str, Any] = dict(metadata)
    bound = logger.bind(component=component, operation=operation)

    bound.debug(f"START: {operation}", phase="start", **metadata)

    try:
        yield context
    finally:
        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        bound.debug(
            f"END: {operation} ({duration_ms:.2f} ms)",
            phase="end",
            duration_ms=duration_ms,
            **context,
        )
