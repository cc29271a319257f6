"""Parser for PHPStan's table report.

PHPStan's default error formatter prints one table per file:

     ------ ---------------------------------------------
      Line   src/Controller/HomeController.php
     ------ ---------------------------------------------
      12     Call to an undefined method App\\Foo::bar().
      30     Variable $baz might not be defined.
     ------ ---------------------------------------------

The parser is a two-state machine driven by one transition function per
line. It starts in AWAITING_FILE and moves to IN_FILE on the first file
header; diagnostic rows seen before any header are dropped rather than
attributed to a guessed file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

import structlog

from phpstan_docker_runner.core.path_resolver import (
    FileSystem,
    LocalFileSystem,
    resolve_report_path,
)
from phpstan_docker_runner.models.diagnostic import Diagnostic, DiagnosticSet
from phpstan_docker_runner.models.scope import AnalysisScope
from phpstan_docker_runner.utils.logging import LogEventNames

log = structlog.get_logger()


class ParserPhase(Enum):
    """Named states of the report parser."""

    AWAITING_FILE = "awaiting-file"
    IN_FILE = "in-file"


@dataclass(frozen=True)
class ParserState:
    """Parser state between two lines."""

    phase: ParserPhase = ParserPhase.AWAITING_FILE
    current_file: str | None = None


class LineKind(Enum):
    """Classification of a single report line."""

    BLANK = "blank"
    SEPARATOR = "separator"
    DIAGNOSTIC = "diagnostic"
    FILE_HEADER = "file_header"
    OTHER = "other"


@dataclass(frozen=True)
class LineEvent:
    """A classified report line."""

    kind: LineKind
    line_number: int | None = None  # 1-based, as printed
    message: str | None = None
    path: str | None = None


@dataclass(frozen=True)
class ParseContext:
    """Where the report came from."""

    workspace_root: str
    remote_root: str
    scope: AnalysisScope


class ReportParser:
    """Converts PHPStan's text report into a DiagnosticSet.

    Example:
        parser = ReportParser()
        context = ParseContext("/ws", "/var/www/html", AnalysisScope.whole_project())
        diagnostics = parser.parse(report.stdout, context)
    """

    # Table borders: nothing but whitespace and rule characters
    SEPARATOR_PATTERN = re.compile(r"^[\s\-─━=]+$")
    DIAGNOSTIC_PATTERN = re.compile(r"^\s*(\d+)\s+(.+)$")
    FILE_PATTERN = re.compile(r"(\S+\.php)")

    def __init__(self, fs: FileSystem | None = None) -> None:
        """Initialize the ReportParser.

        Args:
            fs: Filesystem oracle for path resolution. Defaults to the real disk.
        """
        self._fs = fs or LocalFileSystem()

    def classify(self, line: str) -> LineEvent:
        """Classify one report line.

        Rules apply in priority order: blank, separator, diagnostic row,
        file header. Anything else is OTHER.
        """
        if not line.strip():
            return LineEvent(LineKind.BLANK)

        if self.SEPARATOR_PATTERN.match(line):
            return LineEvent(LineKind.SEPARATOR)

        row = self.DIAGNOSTIC_PATTERN.match(line)
        if row:
            return LineEvent(
                LineKind.DIAGNOSTIC,
                line_number=int(row.group(1)),
                message=row.group(2).strip(),
            )

        header = self.FILE_PATTERN.search(line)
        if header:
            return LineEvent(LineKind.FILE_HEADER, path=header.group(1))

        return LineEvent(LineKind.OTHER)

    def step(
        self,
        state: ParserState,
        line: str,
        context: ParseContext,
    ) -> tuple[ParserState, Diagnostic | None]:
        """Advance the parser by one line.

        Args:
            state: State before the line.
            line: The report line.
            context: Report origin, used to resolve file headers.

        Returns:
            The new state and the diagnostic the line produced, if any.
        """
        event = self.classify(line)

        if event.kind is LineKind.FILE_HEADER and event.path is not None:
            resolution = resolve_report_path(
                event.path,
                context.workspace_root,
                context.remote_root,
                context.scope,
                self._fs,
            )
            log.debug(
                LogEventNames.FILE_HEADER_RESOLVED,
                candidate=event.path,
                path=resolution.path,
                strategy=resolution.strategy.value,
            )
            return ParserState(ParserPhase.IN_FILE, resolution.path), None

        if (
            event.kind is LineKind.DIAGNOSTIC
            and event.line_number is not None
            and event.message is not None
        ):
            line_index = event.line_number - 1
            if state.phase is not ParserPhase.IN_FILE or line_index < 0:
                log.debug(
                    LogEventNames.ORPHAN_DIAGNOSTIC_DROPPED,
                    line_number=event.line_number,
                    phase=state.phase.value,
                )
                return state, None
            return state, Diagnostic(line=line_index, message=event.message)

        return state, None

    def parse(self, stdout: str, context: ParseContext) -> DiagnosticSet:
        """Parse a full report.

        Args:
            stdout: PHPStan's standard output.
            context: Report origin.

        Returns:
            DiagnosticSet keyed by local file path, in report order.
        """
        diagnostics = DiagnosticSet()
        state = ParserState()

        for line in stdout.splitlines():
            state, diagnostic = self.step(state, line, context)
            if diagnostic is not None and state.current_file is not None:
                diagnostics.add(state.current_file, diagnostic)

        log.info(
            LogEventNames.REPORT_PARSED,
            total=diagnostics.total,
            files=diagnostics.file_count,
        )
        return diagnostics
