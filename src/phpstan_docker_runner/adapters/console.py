"""Terminal implementations of the host-side collaborators.

These adapters let the runner work outside an editor: diagnostics are
collected and printed once the run is over, the raw PHPStan output goes to
a stream or file, and notifications become stderr lines.
"""

from __future__ import annotations

import json
import os
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from phpstan_docker_runner.models.diagnostic import Diagnostic

log = structlog.get_logger()


class CollectingDiagnosticsSink:
    """Keeps the displayed diagnostics in memory until they are rendered."""

    def __init__(self) -> None:
        self._by_file: dict[str, list[Diagnostic]] = {}

    def clear(self) -> None:
        self._by_file.clear()

    def set(self, path: str, diagnostics: list[Diagnostic]) -> None:
        self._by_file[path] = list(diagnostics)

    @property
    def diagnostics(self) -> dict[str, list[Diagnostic]]:
        return dict(self._by_file)

    def render_text(self, relative_to: str | None = None) -> str:
        """Render as `path:line: message` lines with 1-based line numbers."""
        lines = []
        for path, diagnostics in self._by_file.items():
            shown = os.path.relpath(path, relative_to) if relative_to else path
            for diagnostic in diagnostics:
                lines.append(f"{shown}:{diagnostic.line + 1}: {diagnostic.message}")
        return "\n".join(lines)

    def render_json(self) -> str:
        return json.dumps(
            {
                path: [diagnostic.to_dict() for diagnostic in diagnostics]
                for path, diagnostics in self._by_file.items()
            },
            indent=2,
        )


class StreamOutputLog:
    """Writes the verbatim command and output to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stderr
        self._buffer: list[str] = []

    def clear(self) -> None:
        self._buffer.clear()

    def append(self, text: str) -> None:
        self._buffer.append(text)

    def append_line(self, text: str) -> None:
        self._buffer.append(text + "\n")

    def show(self) -> None:
        self._stream.write("".join(self._buffer))
        if self._buffer and not self._buffer[-1].endswith("\n"):
            self._stream.write("\n")
        self._stream.flush()

    @property
    def text(self) -> str:
        return "".join(self._buffer)


class FileOutputLog(StreamOutputLog):
    """Writes the verbatim command and output to a file, replacing it per run."""

    def __init__(self, path: str) -> None:
        super().__init__(stream=sys.stderr)
        self._path = path

    def show(self) -> None:
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            f.write(self.text)
        log.debug("output_log_written", path=self._path)


class LoggingProgressReporter:
    """Forwards progress milestones to the structured log."""

    def report(self, increment: int, message: str) -> None:
        log.info("analysis_progress", percent=increment, step=message)


class ConsoleNotifier:
    """Prints user-facing messages to a stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stderr

    def info(self, message: str) -> None:
        self._write("info", message)

    def warning(self, message: str) -> None:
        self._write("warning", message)

    def error(self, message: str) -> None:
        self._write("error", message)

    def _write(self, level: str, message: str) -> None:
        self._stream.write(f"[{level}] {message}\n")
        self._stream.flush()
