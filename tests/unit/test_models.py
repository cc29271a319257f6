"""Tests for scope, request, diagnostic and outcome data models."""

from pathlib import Path

import pytest

from phpstan_docker_runner.models import (
    AnalysisScope,
    Diagnostic,
    DiagnosticSet,
    DiagnosticSeverity,
    RawReport,
    RunOutcome,
    RunStatus,
    ScopeKind,
)


class TestAnalysisScope:
    """Test AnalysisScope dataclass."""

    def test_whole_project(self) -> None:
        scope = AnalysisScope.whole_project()
        assert scope.kind is ScopeKind.WHOLE_PROJECT
        assert scope.path is None
        assert scope.is_whole_project

    def test_single_file_accepts_pathlike(self) -> None:
        """Test that Path objects are stored as strings."""
        scope = AnalysisScope.single_file(Path("/ws/src/Foo.php"))
        assert scope.kind is ScopeKind.SINGLE_FILE
        assert scope.path == "/ws/src/Foo.php"
        assert not scope.is_whole_project

    def test_whole_project_rejects_path(self) -> None:
        with pytest.raises(ValueError, match="does not take a path"):
            AnalysisScope(ScopeKind.WHOLE_PROJECT, "/ws")

    @pytest.mark.parametrize("kind", [ScopeKind.SINGLE_FILE, ScopeKind.DIRECTORY])
    def test_path_required(self, kind: ScopeKind) -> None:
        with pytest.raises(ValueError, match="requires a path"):
            AnalysisScope(kind)

    def test_describe(self) -> None:
        assert AnalysisScope.whole_project().describe() == "whole_project"
        assert AnalysisScope.directory("/ws/src").describe() == "directory:/ws/src"

    def test_is_hashable(self) -> None:
        """Test that scopes can be used as dictionary keys."""
        scopes = {AnalysisScope.whole_project(), AnalysisScope.whole_project()}
        assert len(scopes) == 1


class TestRawReport:
    """Test RawReport exit code classification."""

    @pytest.mark.parametrize(
        ("return_code", "success", "found_issues", "usable"),
        [
            (0, True, False, True),
            (1, False, True, True),
            (2, False, False, False),
            (126, False, False, False),
            (-9, False, False, False),
        ],
    )
    def test_exit_codes(
        self, return_code: int, success: bool, found_issues: bool, usable: bool
    ) -> None:
        report = RawReport(stdout="", stderr="", return_code=return_code, command=("docker",))
        assert report.success is success
        assert report.found_issues is found_issues
        assert report.usable is usable

    def test_command_line_quotes_arguments(self) -> None:
        report = RawReport(
            stdout="",
            stderr="",
            return_code=0,
            command=("docker", "exec", "app", "/var/www/my project/Foo.php"),
        )
        assert report.command_line == "docker exec app '/var/www/my project/Foo.php'"


class TestDiagnostic:
    """Test Diagnostic dataclass."""

    def test_defaults(self) -> None:
        diagnostic = Diagnostic(line=11, message="Undefined variable $x")
        assert diagnostic.severity is DiagnosticSeverity.WARNING
        assert diagnostic.source == "PHPStan"

    def test_range_covers_line(self) -> None:
        assert Diagnostic(line=4, message="x").range == (4, 0, 4, 1000)

    def test_to_dict(self) -> None:
        assert Diagnostic(line=0, message="x").to_dict() == {
            "line": 0,
            "message": "x",
            "severity": "warning",
            "source": "PHPStan",
        }


class TestDiagnosticSet:
    """Test DiagnosticSet container."""

    def test_empty(self) -> None:
        diagnostics = DiagnosticSet()
        assert diagnostics.is_empty
        assert diagnostics.total == 0
        assert diagnostics.file_count == 0
        assert list(diagnostics) == []

    def test_groups_by_file_in_order(self) -> None:
        diagnostics = DiagnosticSet()
        diagnostics.add("/ws/b.php", Diagnostic(1, "first"))
        diagnostics.add("/ws/a.php", Diagnostic(2, "second"))
        diagnostics.add("/ws/b.php", Diagnostic(3, "third"))

        assert diagnostics.files == ["/ws/b.php", "/ws/a.php"]
        assert [d.message for d in diagnostics.get("/ws/b.php")] == ["first", "third"]
        assert diagnostics.total == len(diagnostics) == 3
        assert diagnostics.file_count == 2
        assert "/ws/a.php" in diagnostics
        assert "/ws/c.php" not in diagnostics

    def test_get_returns_copy(self) -> None:
        """Test that callers cannot mutate the set through get()."""
        diagnostics = DiagnosticSet()
        diagnostics.add("/ws/a.php", Diagnostic(0, "x"))
        diagnostics.get("/ws/a.php").append(Diagnostic(1, "y"))
        assert diagnostics.total == 1

    def test_get_unknown_file(self) -> None:
        assert DiagnosticSet().get("/ws/missing.php") == []

    def test_to_dict(self) -> None:
        diagnostics = DiagnosticSet()
        diagnostics.add("/ws/a.php", Diagnostic(0, "x"))
        assert diagnostics.to_dict() == {"/ws/a.php": [Diagnostic(0, "x").to_dict()]}


class TestRunOutcome:
    """Test RunOutcome dataclass."""

    def test_completed(self) -> None:
        outcome = RunOutcome(status=RunStatus.COMPLETED, summary="PHPStan found no problems")
        assert outcome.completed
        assert outcome.diagnostics.is_empty
        assert outcome.error is None

    def test_failed(self) -> None:
        outcome = RunOutcome(status=RunStatus.FAILED, summary="Error running PHPStan: x")
        assert not outcome.completed
