"""Analysis run orchestrator.

This module implements the AnalysisRunner class that coordinates one run:
1. Check that a workspace is open
2. Clear previously displayed diagnostics
3. Build and execute the `docker exec` command
4. Write the command and its raw output to the output log
5. Parse the report into diagnostics
6. Apply the diagnostics to the sink and report a summary
"""

from __future__ import annotations

import asyncio
import os
import shlex
from typing import TYPE_CHECKING

import structlog

from phpstan_docker_runner.core.report_parser import ParseContext, ReportParser
from phpstan_docker_runner.models.diagnostic import DiagnosticSet
from phpstan_docker_runner.models.outcome import RunOutcome, RunStatus
from phpstan_docker_runner.models.request import AnalysisRequest
from phpstan_docker_runner.models.scope import AnalysisScope
from phpstan_docker_runner.utils.async_helpers import (
    ConfigurationError,
    RunInProgressError,
    RunnerError,
    UnexpectedExitError,
)
from phpstan_docker_runner.utils.logging import LogEventNames, bind_context, unbind_context

if TYPE_CHECKING:
    from phpstan_docker_runner.config.schema import RunnerConfig
    from phpstan_docker_runner.core.executor import DockerPhpstanExecutor
    from phpstan_docker_runner.interfaces.editor import (
        DiagnosticsSink,
        Notifier,
        OutputLog,
        ProgressReporter,
    )
    from phpstan_docker_runner.models.request import RawReport

log = structlog.get_logger()

PHP_EXTENSION = ".php"


def summarize(diagnostics: DiagnosticSet) -> str:
    """Return the user-facing summary for a parsed report."""
    if diagnostics.is_empty:
        return "PHPStan found no problems"
    return (
        f"PHPStan found {diagnostics.total} problems in {diagnostics.file_count} files"
    )


class AnalysisRunner:
    """Runs PHPStan for a scope and publishes the results.

    Responsibilities:
    - Build the AnalysisRequest from configuration and scope
    - Keep the output log, progress, sink and notifications in step
    - Allow a single run at a time

    Only one run may be in flight: a run started while another is still in
    progress is skipped with a warning, since both would race on the sink.

    Example:
        runner = AnalysisRunner(config, executor, sink, output, progress, notifier)
        outcome = await runner.run_file("/ws/src/Foo.php", "/ws")
    """

    def __init__(
        self,
        config: RunnerConfig,
        executor: DockerPhpstanExecutor,
        sink: DiagnosticsSink,
        output: OutputLog,
        progress: ProgressReporter,
        notifier: Notifier,
        parser: ReportParser | None = None,
    ) -> None:
        """Initialize the AnalysisRunner.

        Args:
            config: Runner configuration
            executor: Executes the analyzer inside the container
            sink: Problems view receiving the diagnostics
            output: Log receiving the verbatim command and output
            progress: Progress notifications
            notifier: User-facing messages
            parser: Report parser (defaults to one on the real filesystem)
        """
        self._config = config
        self._executor = executor
        self._sink = sink
        self._output = output
        self._progress = progress
        self._notifier = notifier
        self._parser = parser or ReportParser()
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """Return True while a run is in progress."""
        return self._lock.locked()

    def build_request(self, scope: AnalysisScope, workspace_root: str) -> AnalysisRequest:
        """Build the request for a scope from the configuration."""
        return AnalysisRequest(
            container_name=self._config.docker.container_name,
            work_directory=self._config.docker.work_directory,
            phpstan_path=self._config.phpstan.path,
            level=self._config.phpstan.level,
            scope=scope,
            workspace_root=workspace_root,
            config_file=self._config.phpstan.config_file,
            no_progress=self._config.phpstan.no_progress,
            memory_limit=self._config.phpstan.memory_limit,
        )

    async def run_project(self, workspace_root: str | None) -> RunOutcome:
        """Analyse the whole project."""
        return await self.run(AnalysisScope.whole_project(), workspace_root)

    async def run_file(self, path: str | None, workspace_root: str | None) -> RunOutcome:
        """Analyse one PHP file; anything else is a warned no-op."""
        if not path or not path.endswith(PHP_EXTENSION) or not os.path.isfile(path):
            return self._skip("Please open a PHP file first")
        return await self.run(AnalysisScope.single_file(path), workspace_root)

    async def run_directory(self, path: str | None, workspace_root: str | None) -> RunOutcome:
        """Analyse one directory, defaulting to the workspace root."""
        target = path or workspace_root
        if not target:
            return self._skip("Could not determine the working directory")
        return await self.run(AnalysisScope.directory(target), workspace_root)

    async def on_file_saved(self, path: str, workspace_root: str | None) -> RunOutcome | None:
        """Re-analyse a saved PHP file when auto-run is enabled.

        Returns:
            The outcome, or None if no run was triggered.
        """
        if not self._config.phpstan.auto_run or not path.endswith(PHP_EXTENSION):
            return None
        return await self.run_file(path, workspace_root)

    async def run(self, scope: AnalysisScope, workspace_root: str | None) -> RunOutcome:
        """Run PHPStan for a scope.

        Args:
            scope: What to analyse
            workspace_root: Local workspace root, None if no workspace is open

        Returns:
            RunOutcome describing what happened. Errors are reported to the
            notifier and returned, never raised.
        """
        if self._lock.locked():
            error = RunInProgressError("PHPStan is already running")
            log.warning(LogEventNames.RUN_SKIPPED, scope=scope.describe(), reason=str(error))
            return self._skip(
                "PHPStan is already running, wait for the current analysis to finish",
                error,
            )

        async with self._lock:
            bind_context(scope=scope.describe(), container=self._config.docker.container_name)
            try:
                return await self._run(scope, workspace_root)
            finally:
                unbind_context("scope", "container")

    async def _run(self, scope: AnalysisScope, workspace_root: str | None) -> RunOutcome:
        if not workspace_root or not os.path.isdir(workspace_root):
            return self._fail(ConfigurationError("No open workspace found"))

        log.info(LogEventNames.RUN_STARTED, workspace_root=workspace_root)

        self._sink.clear()
        self._progress.report(0, "Preparing command...")

        request = self.build_request(scope, workspace_root)
        command_line = shlex.join(self._executor.build_command(request))

        self._progress.report(30, "Launching analysis...")
        self._progress.report(50, "Analyzing and collecting diagnostics...")

        try:
            report = await self._executor.execute(request)
        except UnexpectedExitError as e:
            self._write_output(e.report.command_line, e.report)
            return self._fail(e, report=e.report)
        except RunnerError as e:
            self._write_output(command_line, None)
            return self._fail(e)

        self._write_output(report.command_line, report)
        self._progress.report(100, "Processing results...")

        context = ParseContext(
            workspace_root=workspace_root,
            remote_root=request.work_directory,
            scope=scope,
        )
        diagnostics = self._parser.parse(report.stdout, context)

        # Publish only after the whole report is parsed
        for path, file_diagnostics in diagnostics:
            self._sink.set(path, file_diagnostics)

        summary = summarize(diagnostics)
        if diagnostics.is_empty:
            self._notifier.info(summary)
        else:
            self._notifier.warning(summary)

        if report.stderr:
            log.warning(LogEventNames.COMMAND_STDERR, stderr=report.stderr)

        log.info(
            LogEventNames.RUN_COMPLETED,
            return_code=report.return_code,
            total=diagnostics.total,
            files=diagnostics.file_count,
        )
        return RunOutcome(
            status=RunStatus.COMPLETED,
            summary=summary,
            diagnostics=diagnostics,
            report=report,
        )

    def _write_output(self, command_line: str, report: RawReport | None) -> None:
        """Write the command and whatever it printed to the output log."""
        self._output.clear()
        self._output.append_line(f"Command: {command_line}")
        self._output.append_line("--- STDOUT ---")
        self._output.append(report.stdout if report else "")
        if report and report.stderr:
            self._output.append_line("\n--- STDERR ---")
            self._output.append(report.stderr)
        self._output.show()

    def _fail(self, error: RunnerError, report: RawReport | None = None) -> RunOutcome:
        log.error(LogEventNames.RUN_FAILED, error=str(error), error_type=type(error).__name__)
        summary = f"Error running PHPStan: {error}"
        self._notifier.error(summary)
        return RunOutcome(status=RunStatus.FAILED, summary=summary, report=report, error=error)

    def _skip(self, message: str, error: RunnerError | None = None) -> RunOutcome:
        self._notifier.warning(message)
        return RunOutcome(status=RunStatus.SKIPPED, summary=message, error=error)
