"""Data models for diagnostics produced from an analyzer report."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DIAGNOSTIC_SOURCE = "PHPStan"

# The report carries no column information; diagnostics span the whole line.
LINE_END_COLUMN = 1000


class DiagnosticSeverity(Enum):
    """Severity of a diagnostic, as understood by a problems view."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True)
class Diagnostic:
    """One problem reported for a file."""

    line: int  # 0-based
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    source: str = DIAGNOSTIC_SOURCE

    @property
    def range(self) -> tuple[int, int, int, int]:
        """(start line, start column, end line, end column)."""
        return (self.line, 0, self.line, LINE_END_COLUMN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "message": self.message,
            "severity": self.severity.value,
            "source": self.source,
        }


@dataclass
class DiagnosticSet:
    """Diagnostics keyed by local file path, in report order."""

    _by_file: dict[str, list[Diagnostic]] = field(default_factory=dict)

    def add(self, path: str, diagnostic: Diagnostic) -> None:
        self._by_file.setdefault(path, []).append(diagnostic)

    def get(self, path: str) -> list[Diagnostic]:
        return list(self._by_file.get(path, []))

    def __iter__(self) -> Iterator[tuple[str, list[Diagnostic]]]:
        for path, diagnostics in self._by_file.items():
            yield path, list(diagnostics)

    def __len__(self) -> int:
        return self.total

    def __contains__(self, path: object) -> bool:
        return path in self._by_file

    @property
    def files(self) -> list[str]:
        return list(self._by_file)

    @property
    def total(self) -> int:
        """Total number of diagnostics across all files."""
        return sum(len(diagnostics) for diagnostics in self._by_file.values())

    @property
    def file_count(self) -> int:
        return len(self._by_file)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Convert to a JSON-serializable mapping."""
        return {
            path: [diagnostic.to_dict() for diagnostic in diagnostics]
            for path, diagnostics in self._by_file.items()
        }
