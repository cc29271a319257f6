"""Data models for one analyzer invocation and its captured output."""

import shlex
from dataclasses import dataclass

from .scope import AnalysisScope

# PHPStan exit codes
EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1


@dataclass(frozen=True)
class AnalysisRequest:
    """Everything needed to build a single `docker exec ... analyse` call."""

    container_name: str
    work_directory: str  # remote, POSIX
    phpstan_path: str
    level: int
    scope: AnalysisScope
    workspace_root: str  # local
    config_file: str | None = None
    no_progress: bool = True
    memory_limit: str | None = None


@dataclass(frozen=True)
class RawReport:
    """Captured output of an analyzer run."""

    stdout: str
    stderr: str
    return_code: int
    command: tuple[str, ...]

    @property
    def success(self) -> bool:
        """Return True if the analyzer exited cleanly."""
        return self.return_code == EXIT_SUCCESS

    @property
    def found_issues(self) -> bool:
        """Return True if the analyzer exited with its "issues found" code."""
        return self.return_code == EXIT_ISSUES_FOUND

    @property
    def usable(self) -> bool:
        """Return True if stdout carries a report worth parsing."""
        return self.success or self.found_issues

    @property
    def command_line(self) -> str:
        """The command as a copy-pasteable shell string."""
        return shlex.join(self.command)
