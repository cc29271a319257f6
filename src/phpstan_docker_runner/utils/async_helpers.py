"""Async utility functions and the runner's exception hierarchy.

This module provides:
- Custom exceptions for error handling
- Timeout wrappers for async operations
"""

from __future__ import annotations

import asyncio
import builtins
from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar

import structlog

if TYPE_CHECKING:
    from phpstan_docker_runner.models.request import RawReport

log = structlog.get_logger()

T = TypeVar("T")


# =============================================================================
# Custom Exceptions
# =============================================================================


class RunnerError(Exception):
    """Base exception for all runner errors."""


class ConfigurationError(RunnerError):
    """The run cannot start: no workspace, no docker binary, bad settings."""


class ExecutionError(RunnerError):
    """The analyzer process did not produce a usable report."""


class CommandTimeoutError(ExecutionError):
    """The analyzer process exceeded its timeout."""


class UnexpectedExitError(ExecutionError):
    """The analyzer exited with a code other than success or "issues found".

    Attributes:
        report: The output captured before the process exited.
    """

    def __init__(self, message: str, report: RawReport) -> None:
        super().__init__(message)
        self.report = report


class RunInProgressError(RunnerError):
    """Another analysis run is still in progress."""


class TimeoutError(RunnerError):
    """Operation timed out."""


# =============================================================================
# Timeout Utilities
# =============================================================================


async def with_timeout(
    coro: Awaitable[T],
    timeout: float,
    error_message: str | None = None,
) -> T:
    """Execute an awaitable with a timeout.

    Args:
        coro: The coroutine to execute.
        timeout: Timeout in seconds.
        error_message: Custom error message for timeout.

    Returns:
        The result of the coroutine.

    Raises:
        TimeoutError: If the operation times out.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except builtins.TimeoutError as e:
        msg = error_message or f"Operation timed out after {timeout}s"
        log.warning("operation_timeout", timeout=timeout)
        raise TimeoutError(msg) from e
