"""Protocol definitions for the host-side collaborators."""

from .editor import DiagnosticsSink, Notifier, OutputLog, ProgressReporter

__all__ = ["DiagnosticsSink", "Notifier", "OutputLog", "ProgressReporter"]
