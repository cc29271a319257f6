"""Host-side adapter implementations.

- console: terminal sink, output log, progress and notifier
"""

from .console import (
    CollectingDiagnosticsSink,
    ConsoleNotifier,
    FileOutputLog,
    LoggingProgressReporter,
    StreamOutputLog,
)

__all__ = [
    "CollectingDiagnosticsSink",
    "ConsoleNotifier",
    "FileOutputLog",
    "LoggingProgressReporter",
    "StreamOutputLog",
]
