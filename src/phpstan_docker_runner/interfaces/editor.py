"""Abstract interfaces for the host that displays analysis results."""

from typing import Protocol

from ..models.diagnostic import Diagnostic


class DiagnosticsSink(Protocol):
    """The host's problems view.

    A sink is owned by the host and handed to each run. A run clears it
    before starting and then sets each file's diagnostics exactly once.
    """

    def clear(self) -> None:
        """Remove every diagnostic currently displayed."""
        ...

    def set(self, path: str, diagnostics: list[Diagnostic]) -> None:
        """
        Replace the diagnostics displayed for one file.

        Args:
            path: Absolute local file path
            diagnostics: Diagnostics for the file, in report order
        """
        ...


class OutputLog(Protocol):
    """Human-readable channel receiving the verbatim command and its output."""

    def clear(self) -> None:
        """Discard previous content."""
        ...

    def append(self, text: str) -> None:
        """Append text as-is."""
        ...

    def append_line(self, text: str) -> None:
        """Append text followed by a newline."""
        ...

    def show(self) -> None:
        """Bring the log to the user's attention without stealing focus."""
        ...


class ProgressReporter(Protocol):
    """Non-blocking progress notifications for a run."""

    def report(self, increment: int, message: str) -> None:
        """
        Report a progress milestone.

        Args:
            increment: Progress in percent, 0 to 100
            message: Short description of the current step
        """
        ...


class Notifier(Protocol):
    """User-facing messages: one summary or error per run."""

    def info(self, message: str) -> None:
        """Show an informational message."""
        ...

    def warning(self, message: str) -> None:
        """Show a warning."""
        ...

    def error(self, message: str) -> None:
        """Show an error."""
        ...
