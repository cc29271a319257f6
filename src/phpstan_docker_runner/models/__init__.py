"""Data models and transfer objects."""

from .diagnostic import Diagnostic, DiagnosticSet, DiagnosticSeverity
from .outcome import RunOutcome, RunStatus
from .request import EXIT_ISSUES_FOUND, EXIT_SUCCESS, AnalysisRequest, RawReport
from .scope import AnalysisScope, ScopeKind

__all__ = [
    # Scope models
    "ScopeKind",
    "AnalysisScope",
    # Invocation models
    "EXIT_SUCCESS",
    "EXIT_ISSUES_FOUND",
    "AnalysisRequest",
    "RawReport",
    # Diagnostic models
    "DiagnosticSeverity",
    "Diagnostic",
    "DiagnosticSet",
    # Run models
    "RunStatus",
    "RunOutcome",
]
