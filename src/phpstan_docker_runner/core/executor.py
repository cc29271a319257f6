"""Runs PHPStan inside a Docker container.

This module builds the `docker exec <container> <phpstan> analyse ...`
invocation for an AnalysisRequest and runs it:
- Never uses shell=True
- Maps the local target path into the container's working directory
- Enforces a timeout on every run
- Treats PHPStan's "issues found" exit code as a normal completion
"""

from __future__ import annotations

import asyncio
import os
import posixpath
import shutil
import subprocess
from typing import TYPE_CHECKING

import structlog

from phpstan_docker_runner.models.request import AnalysisRequest, RawReport
from phpstan_docker_runner.utils.async_helpers import (
    CommandTimeoutError,
    ConfigurationError,
    ExecutionError,
    TimeoutError,
    UnexpectedExitError,
    with_timeout,
)
from phpstan_docker_runner.utils.logging import LogEventNames

if TYPE_CHECKING:
    from phpstan_docker_runner.config.schema import RunnerConfig

log = structlog.get_logger()


def remote_target(request: AnalysisRequest) -> str:
    """Return the path argument PHPStan receives inside the container.

    Whole-project runs analyse the remote working directory itself. File and
    directory runs re-root the local path, taken relative to the workspace,
    under the remote working directory using forward slashes.
    """
    scope = request.scope
    if scope.path is None:
        return request.work_directory

    relative = os.path.relpath(scope.path, request.workspace_root)
    relative = relative.replace(os.sep, "/").replace("\\", "/")
    return posixpath.normpath(posixpath.join(request.work_directory, relative))


def build_phpstan_command(request: AnalysisRequest) -> list[str]:
    """Build the PHPStan argv run inside the container."""
    args = [request.phpstan_path, "analyse"]
    if request.no_progress:
        args.append("--no-progress")
    args.append(f"--level={request.level}")

    # The project tree is mounted identically on both sides, so the config
    # file is looked up locally even though PHPStan reads it remotely.
    if request.config_file and os.path.exists(
        os.path.join(request.workspace_root, request.config_file)
    ):
        args.append(f"--configuration={request.config_file}")

    if request.memory_limit:
        args.append(f"--memory-limit={request.memory_limit}")

    args.append(remote_target(request))
    return args


class DockerPhpstanExecutor:
    """Executes PHPStan through `docker exec`.

    Example:
        executor = DockerPhpstanExecutor()
        report = await executor.execute(request)
        print(report.stdout)
    """

    # Default timeout for an analysis run (seconds)
    DEFAULT_TIMEOUT = 600

    # Timeout for short docker queries such as `docker inspect` (seconds)
    INSPECT_TIMEOUT = 15

    def __init__(
        self,
        docker_path: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the executor.

        Args:
            docker_path: Path to the docker binary. If None, uses PATH.
            timeout: Timeout for analysis runs in seconds.

        Raises:
            ConfigurationError: If the docker binary is not found.
        """
        resolved_path = docker_path or self._find_docker()
        if not resolved_path:
            raise ConfigurationError("docker CLI not found. Install Docker or set docker.docker_path")

        self._docker_path: str = resolved_path
        self._timeout = timeout

    @classmethod
    def from_config(cls, config: RunnerConfig) -> DockerPhpstanExecutor:
        """Create an executor from the runner configuration."""
        return cls(docker_path=config.docker.docker_path, timeout=config.runtime.timeout)

    def _find_docker(self) -> str | None:
        """Find the docker binary in PATH."""
        return shutil.which("docker")

    @property
    def timeout(self) -> int:
        return self._timeout

    def build_command(self, request: AnalysisRequest) -> list[str]:
        """Build the full `docker exec` argv for a request."""
        return [
            self._docker_path,
            "exec",
            request.container_name,
            *build_phpstan_command(request),
        ]

    async def execute(self, request: AnalysisRequest) -> RawReport:
        """Run PHPStan for a request.

        Args:
            request: What to analyse and where.

        Returns:
            RawReport for a run that exited with 0 or 1.

        Raises:
            ConfigurationError: If the workspace root is missing.
            CommandTimeoutError: If the run exceeds the timeout.
            UnexpectedExitError: If PHPStan exits with any other code.
        """
        if not request.workspace_root or not os.path.isdir(request.workspace_root):
            raise ConfigurationError(f"Workspace root not found: {request.workspace_root!r}")

        cmd = self.build_command(request)
        log.info(LogEventNames.COMMAND_BUILT, command=cmd, scope=request.scope.describe())

        report = await self._run_command(cmd, cwd=request.workspace_root, timeout=self._timeout)

        if not report.usable:
            log.error(
                LogEventNames.COMMAND_UNEXPECTED_EXIT,
                command=cmd,
                return_code=report.return_code,
            )
            detail = report.stderr.strip() or report.stdout.strip() or "no output"
            raise UnexpectedExitError(
                f"Command exited with code {report.return_code}: {detail}", report
            )

        return report

    async def is_container_running(self, container_name: str) -> bool:
        """Return True if `docker inspect` reports the container as running."""
        cmd = [
            self._docker_path,
            "inspect",
            "--format",
            "{{.State.Running}}",
            container_name,
        ]
        try:
            report = await self._run_command(cmd, timeout=self.INSPECT_TIMEOUT)
        except ExecutionError:
            return False
        return report.success and report.stdout.strip() == "true"

    async def _run_command(
        self,
        cmd: list[str],
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> RawReport:
        """Run a command and capture its output in full.

        Args:
            cmd: Full argv.
            cwd: Local working directory.
            timeout: Timeout in seconds (uses default if None).

        Returns:
            RawReport with stdout, stderr, and return code.

        Raises:
            CommandTimeoutError: If the command times out.
            ExecutionError: If the command cannot be started.
        """
        effective_timeout = timeout or self._timeout

        log.debug(LogEventNames.COMMAND_EXECUTING, command=cmd, cwd=cwd, timeout=effective_timeout)

        def run_sync() -> subprocess.CompletedProcess[str]:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=cwd,
                timeout=effective_timeout,
                shell=False,
            )

        try:
            proc = await with_timeout(
                asyncio.to_thread(run_sync),
                timeout=effective_timeout + 5,  # Extra buffer for thread overhead
            )
        except (subprocess.TimeoutExpired, TimeoutError) as e:
            msg = f"Command timed out after {effective_timeout}s: {' '.join(cmd)}"
            log.error(LogEventNames.COMMAND_TIMEOUT, command=cmd, timeout=effective_timeout)
            raise CommandTimeoutError(msg) from e
        except OSError as e:
            raise ExecutionError(f"Could not start {cmd[0]}: {e}") from e

        report = RawReport(
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            return_code=proc.returncode,
            command=tuple(cmd),
        )
        log.debug(
            LogEventNames.COMMAND_FINISHED,
            return_code=report.return_code,
            stdout_bytes=len(report.stdout),
            stderr_bytes=len(report.stderr),
        )
        return report
