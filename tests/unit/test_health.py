"""Tests for the health check module."""

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from phpstan_docker_runner.config.schema import RunnerConfig
from phpstan_docker_runner.utils.health import (
    CheckResult,
    HealthChecker,
    HealthReport,
    HealthStatus,
)

EXECUTOR_CLASS = "phpstan_docker_runner.core.executor.DockerPhpstanExecutor"


class TestHealthStatus:
    """Tests for HealthStatus enum."""

    def test_health_status_values(self) -> None:
        """Test that all expected status values exist."""
        assert HealthStatus.HEALTHY.value == "healthy"
        assert HealthStatus.DEGRADED.value == "degraded"
        assert HealthStatus.UNHEALTHY.value == "unhealthy"


class TestHealthReport:
    """Tests for HealthReport dataclass."""

    def test_health_report_to_dict(self) -> None:
        """Test converting HealthReport to dictionary."""
        timestamp = datetime(2026, 2, 4, 12, 0, 0, tzinfo=UTC)
        report = HealthReport(
            healthy=True,
            status=HealthStatus.HEALTHY,
            timestamp=timestamp,
            checks=[
                CheckResult(
                    name="container",
                    status=HealthStatus.HEALTHY,
                    message="Container php-app is running",
                    latency_ms=10.0,
                ),
            ],
            details={"total": 1},
        )

        result = report.to_dict()

        assert result["healthy"] is True
        assert result["status"] == "healthy"
        assert result["timestamp"] == "2026-02-04T12:00:00+00:00"
        assert result["checks"][0]["name"] == "container"
        assert result["checks"][0]["latency_ms"] == 10.0
        assert result["details"] == {"total": 1}


class TestHealthChecker:
    """Tests for HealthChecker class."""

    async def test_container_running(self, runner_config: RunnerConfig, workspace: Path) -> None:
        """Test container check when the container is up."""
        checker = HealthChecker(runner_config, str(workspace))

        with patch(
            f"{EXECUTOR_CLASS}.is_container_running", new=AsyncMock(return_value=True)
        ) as mock_running:
            result = await checker._check_container()

        mock_running.assert_awaited_once_with("php-app")
        assert result.name == "container"
        assert result.status == HealthStatus.HEALTHY
        assert result.latency_ms is not None

    async def test_container_stopped(self, runner_config: RunnerConfig, workspace: Path) -> None:
        """Test container check when the container is down."""
        checker = HealthChecker(runner_config, str(workspace))

        with patch(f"{EXECUTOR_CLASS}.is_container_running", new=AsyncMock(return_value=False)):
            result = await checker._check_container()

        assert result.status == HealthStatus.UNHEALTHY
        assert "not running" in result.message

    async def test_docker_missing(self, workspace: Path) -> None:
        """Test container check without a docker binary."""
        checker = HealthChecker(RunnerConfig(), str(workspace))

        with patch("shutil.which", return_value=None):
            result = await checker._check_container()

        assert result.status == HealthStatus.UNHEALTHY
        assert "docker CLI not found" in result.message

    async def test_workspace_healthy(self, runner_config: RunnerConfig, workspace: Path) -> None:
        result = await HealthChecker(runner_config, str(workspace))._check_workspace()
        assert result.status == HealthStatus.HEALTHY

    async def test_workspace_missing(self, runner_config: RunnerConfig, tmp_path: Path) -> None:
        checker = HealthChecker(runner_config, str(tmp_path / "missing"))
        result = await checker._check_workspace()
        assert result.status == HealthStatus.UNHEALTHY

    async def test_no_workspace(self, runner_config: RunnerConfig) -> None:
        result = await HealthChecker(runner_config)._check_workspace()
        assert result.status == HealthStatus.UNHEALTHY

    async def test_config_file_missing_is_degraded(
        self, runner_config: RunnerConfig, tmp_path: Path
    ) -> None:
        """Test that a missing phpstan.neon only degrades the report."""
        result = await HealthChecker(runner_config, str(tmp_path))._check_workspace()
        assert result.status == HealthStatus.DEGRADED
        assert "phpstan.neon" in result.message

    async def test_run_all_checks_healthy(
        self, runner_config: RunnerConfig, workspace: Path
    ) -> None:
        """Test run_all_checks with all healthy checks."""
        checker = HealthChecker(runner_config, str(workspace))

        with patch(f"{EXECUTOR_CLASS}.is_container_running", new=AsyncMock(return_value=True)):
            report = await checker.run_all_checks()

        assert report.healthy is True
        assert report.status == HealthStatus.HEALTHY
        assert [c.name for c in report.checks] == ["container", "workspace"]
        assert report.details["healthy_checks"] == 2

    async def test_run_all_checks_degraded(
        self, runner_config: RunnerConfig, tmp_path: Path
    ) -> None:
        """Test that a degraded check keeps the report healthy."""
        checker = HealthChecker(runner_config, str(tmp_path))

        with patch(f"{EXECUTOR_CLASS}.is_container_running", new=AsyncMock(return_value=True)):
            report = await checker.run_all_checks()

        assert report.healthy is True
        assert report.status == HealthStatus.DEGRADED

    async def test_run_all_checks_with_failure(
        self, runner_config: RunnerConfig, workspace: Path
    ) -> None:
        """Test run_all_checks with one failing check."""
        checker = HealthChecker(runner_config, str(workspace))

        with patch(f"{EXECUTOR_CLASS}.is_container_running", new=AsyncMock(return_value=False)):
            report = await checker.run_all_checks()

        assert report.healthy is False
        assert report.status == HealthStatus.UNHEALTHY
        assert report.details["unhealthy_checks"] == 1

    async def test_check_exception_is_reported(
        self, runner_config: RunnerConfig, workspace: Path
    ) -> None:
        """Test that a check raising is reported as unhealthy, not propagated."""
        checker = HealthChecker(runner_config, str(workspace))

        with patch(
            f"{EXECUTOR_CLASS}.is_container_running",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            report = await checker.run_all_checks()

        assert report.healthy is False
        assert any("boom" in c.message for c in report.checks)


@pytest.fixture(autouse=True)
def _no_docker_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PHPSTAN_DOCKER_ overrides from the environment out of these tests."""
    monkeypatch.delenv("PHPSTAN_DOCKER_DOCKER__DOCKER_PATH", raising=False)
