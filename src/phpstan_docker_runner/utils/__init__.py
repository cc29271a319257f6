"""Utility functions and helpers.

This module provides various utilities for the PHPStan Docker Runner:
- async_helpers: Exception hierarchy and timeout wrappers
- logging: Structured logging configuration
- health: Health check utilities
"""

from phpstan_docker_runner.utils.async_helpers import (
    CommandTimeoutError,
    ConfigurationError,
    ExecutionError,
    RunInProgressError,
    RunnerError,
    UnexpectedExitError,
)
from phpstan_docker_runner.utils.health import (
    HealthChecker,
    HealthReport,
    HealthStatus,
)
from phpstan_docker_runner.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    configure_logging,
    unbind_context,
)

__all__ = [
    # Errors
    "CommandTimeoutError",
    "ConfigurationError",
    "ExecutionError",
    # Health
    "HealthChecker",
    "HealthReport",
    "HealthStatus",
    # Logging
    "LogFormat",
    "LogLevel",
    "RunInProgressError",
    "RunnerError",
    "UnexpectedExitError",
    "bind_context",
    "configure_logging",
    "unbind_context",
]
