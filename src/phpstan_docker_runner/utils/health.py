"""Health check utilities for the analysis environment.

This module checks that a run can succeed before one is attempted:
- The docker CLI is available
- The configured container is running
- The workspace and its PHPStan configuration file are present
"""

from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from phpstan_docker_runner.utils.async_helpers import ConfigurationError
from phpstan_docker_runner.utils.logging import LogEventNames

if TYPE_CHECKING:
    from phpstan_docker_runner.config.schema import RunnerConfig

log = structlog.get_logger()


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str
    latency_ms: float | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Overall health report."""

    healthy: bool
    status: HealthStatus
    timestamp: datetime
    checks: list[CheckResult]
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "healthy": self.healthy,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "checks": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                    "details": c.details,
                }
                for c in self.checks
            ],
            "details": self.details,
        }


class HealthChecker:
    """Checks the docker CLI, the container and the workspace.

    Example:
        checker = HealthChecker(config, workspace_root="/ws")
        report = await checker.run_all_checks()
        if not report.healthy:
            print(report.to_dict())
    """

    def __init__(self, config: RunnerConfig, workspace_root: str | None = None) -> None:
        """Initialize the health checker.

        Args:
            config: Runner configuration
            workspace_root: Local workspace root, if one is open
        """
        self._config = config
        self._workspace_root = workspace_root

    async def run_all_checks(self) -> HealthReport:
        """Run all health checks and return a report.

        Returns:
            HealthReport with results of all checks
        """
        log.info(LogEventNames.HEALTH_CHECK_START)
        start_time = datetime.now(UTC)

        checks: list[CheckResult] = []

        results = await asyncio.gather(
            self._check_container(),
            self._check_workspace(),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, BaseException):
                checks.append(
                    CheckResult(
                        name="unknown",
                        status=HealthStatus.UNHEALTHY,
                        message=f"Check failed with exception: {result}",
                    )
                )
            elif isinstance(result, CheckResult):
                checks.append(result)

        if all(c.status == HealthStatus.HEALTHY for c in checks):
            overall_status = HealthStatus.HEALTHY
            healthy = True
        elif any(c.status == HealthStatus.UNHEALTHY for c in checks):
            overall_status = HealthStatus.UNHEALTHY
            healthy = False
        else:
            overall_status = HealthStatus.DEGRADED
            healthy = True

        report = HealthReport(
            healthy=healthy,
            status=overall_status,
            timestamp=start_time,
            checks=checks,
            details={
                "total_checks": len(checks),
                "healthy_checks": sum(1 for c in checks if c.status == HealthStatus.HEALTHY),
                "degraded_checks": sum(1 for c in checks if c.status == HealthStatus.DEGRADED),
                "unhealthy_checks": sum(1 for c in checks if c.status == HealthStatus.UNHEALTHY),
            },
        )

        log.info(
            LogEventNames.HEALTH_CHECK_COMPLETE,
            healthy=healthy,
            status=overall_status.value,
            checks_run=len(checks),
        )

        return report

    async def _check_container(self) -> CheckResult:
        """Check that docker is installed and the container is running."""
        from phpstan_docker_runner.core.executor import DockerPhpstanExecutor

        container = self._config.docker.container_name
        start = time.monotonic()

        try:
            executor = DockerPhpstanExecutor.from_config(self._config)
        except ConfigurationError as e:
            return CheckResult(name="container", status=HealthStatus.UNHEALTHY, message=str(e))

        running = await executor.is_container_running(container)
        latency = (time.monotonic() - start) * 1000

        if running:
            return CheckResult(
                name="container",
                status=HealthStatus.HEALTHY,
                message=f"Container {container} is running",
                latency_ms=latency,
            )
        return CheckResult(
            name="container",
            status=HealthStatus.UNHEALTHY,
            message=f"Container {container} is not running",
            latency_ms=latency,
        )

    async def _check_workspace(self) -> CheckResult:
        """Check the workspace root and the optional PHPStan config file."""
        if not self._workspace_root or not os.path.isdir(self._workspace_root):
            return CheckResult(
                name="workspace",
                status=HealthStatus.UNHEALTHY,
                message=f"Workspace root not found: {self._workspace_root}",
            )

        config_file = self._config.phpstan.config_file
        if config_file and not os.path.exists(os.path.join(self._workspace_root, config_file)):
            return CheckResult(
                name="workspace",
                status=HealthStatus.DEGRADED,
                message=f"{config_file} not found, PHPStan will run without --configuration",
                details={"workspace_root": self._workspace_root},
            )

        return CheckResult(
            name="workspace",
            status=HealthStatus.HEALTHY,
            message="Workspace found",
            details={"workspace_root": self._workspace_root, "config_file": config_file},
        )
