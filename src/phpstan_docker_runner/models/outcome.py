"""Data models for the result of an analysis run."""

from dataclasses import dataclass, field
from enum import Enum

from .diagnostic import DiagnosticSet
from .request import RawReport


class RunStatus(Enum):
    """How an analysis run ended."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RunOutcome:
    """What a run produced, for the caller that triggered it."""

    status: RunStatus
    summary: str
    diagnostics: DiagnosticSet = field(default_factory=DiagnosticSet)
    report: RawReport | None = None
    error: Exception | None = None

    @property
    def completed(self) -> bool:
        return self.status is RunStatus.COMPLETED
