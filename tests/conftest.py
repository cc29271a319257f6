"""Shared test fixtures for PHPStan Docker Runner."""

import posixpath
from pathlib import Path

import pytest

from phpstan_docker_runner.config.schema import DockerConfig, PhpstanConfig, RunnerConfig

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
REPORTS_DIR = FIXTURES_DIR / "reports"


class FakeFileSystem:
    """In-memory FileSystem holding a fixed set of file paths."""

    def __init__(self, files: list[str]) -> None:
        self.files = sorted(files)

    def exists(self, path: str) -> bool:
        return path in self.files or self.is_dir(path)

    def is_dir(self, path: str) -> bool:
        prefix = path.rstrip("/") + "/"
        return any(f.startswith(prefix) for f in self.files)

    def find_file(self, root: str, name: str) -> str | None:
        prefix = root.rstrip("/") + "/"
        for f in self.files:
            if f.startswith(prefix) and posixpath.basename(f) == name:
                return f
        return None


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def table_report() -> str:
    """PHPStan table output covering two files."""
    return (REPORTS_DIR / "table.txt").read_text()


@pytest.fixture
def no_errors_report() -> str:
    """PHPStan output for a clean run."""
    return (REPORTS_DIR / "no_errors.txt").read_text()


@pytest.fixture
def orphan_rows_report() -> str:
    """PHPStan output with diagnostic rows but no file header."""
    return (REPORTS_DIR / "orphan_rows.txt").read_text()


@pytest.fixture
def make_fs() -> type[FakeFileSystem]:
    """Return the FakeFileSystem class for tests that need a custom tree."""
    return FakeFileSystem


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """A small workspace at /ws."""
    return FakeFileSystem(
        [
            "/ws/phpstan.neon",
            "/ws/src/Controller/HomeController.php",
            "/ws/src/Service/Mailer.php",
            "/ws/src/Foo.php",
            "/ws/lib/Legacy/Foo.php",
        ]
    )


@pytest.fixture
def runner_config() -> RunnerConfig:
    """Create a test runner configuration."""
    return RunnerConfig(
        docker=DockerConfig(
            container_name="php-app",
            work_directory="/var/www/html",
            docker_path="/usr/bin/docker",
        ),
        phpstan=PhpstanConfig(
            path="vendor/bin/phpstan",
            config_file="phpstan.neon",
            level=6,
        ),
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A real workspace on disk with a PHPStan config and a few PHP files."""
    (tmp_path / "phpstan.neon").write_text("parameters:\n  level: 6\n")
    (tmp_path / "src" / "Controller").mkdir(parents=True)
    (tmp_path / "src" / "Service").mkdir(parents=True)
    (tmp_path / "src" / "Controller" / "HomeController.php").write_text("<?php\n")
    (tmp_path / "src" / "Service" / "Mailer.php").write_text("<?php\n")
    return tmp_path
