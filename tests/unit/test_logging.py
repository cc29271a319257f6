"""Tests for the logging module."""

import json
import logging
from pathlib import Path

import structlog

from phpstan_docker_runner.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    add_context_processor,
    bind_context,
    configure_logging,
    unbind_context,
)


class TestAddContextProcessor:
    """Tests for the service/version processor."""

    def test_adds_service_and_version(self) -> None:
        event_dict = add_context_processor(
            logging.getLogger("test"), "info", {"event": "analysis_run_started"}
        )
        assert event_dict["service"] == "phpstan-docker-runner"
        assert "version" in event_dict
        assert event_dict["event"] == "analysis_run_started"


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_with_console_format(self) -> None:
        """Test configuration with console format."""
        configure_logging(level=LogLevel.DEBUG, log_format=LogFormat.CONSOLE)
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_json_format(self) -> None:
        """Test configuration with JSON format."""
        configure_logging(level=LogLevel.INFO, log_format=LogFormat.JSON)
        assert logging.getLogger().level == logging.INFO

    def test_configure_with_string_values(self) -> None:
        """Test configuration with lowercase string values."""
        configure_logging(level="warning", log_format="JSON")
        assert logging.getLogger().level == logging.WARNING

    def test_configure_with_file_logging(self, tmp_path: Path) -> None:
        """Test that the log file directory is created."""
        log_file = tmp_path / "nested" / "runner.log"
        configure_logging(
            level=LogLevel.INFO,
            log_format=LogFormat.JSON,
            file_path=log_file,
            file_enabled=True,
        )
        assert log_file.parent.exists()
        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    def test_file_logging_disabled(self, tmp_path: Path) -> None:
        """Test that a path alone does not enable file logging."""
        log_file = tmp_path / "nested" / "runner.log"
        configure_logging(file_path=log_file, file_enabled=False)
        assert not log_file.parent.exists()

    def test_json_output_contains_context(self, tmp_path: Path) -> None:
        """Test that JSON lines carry the event name and bound context."""
        log_file = tmp_path / "runner.log"
        configure_logging(
            level=LogLevel.INFO,
            log_format=LogFormat.JSON,
            file_path=log_file,
            file_enabled=True,
        )
        bind_context(container="php-app")
        try:
            log = structlog.get_logger("test_json")
            log.info(LogEventNames.RUN_STARTED, workspace_root="/ws")
        finally:
            structlog.contextvars.clear_contextvars()
        for handler in logging.getLogger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["event"] == "analysis_run_started"
        assert entry["container"] == "php-app"
        assert entry["service"] == "phpstan-docker-runner"


class TestContextFunctions:
    """Tests for context binding functions."""

    def test_bind_and_clear_context(self) -> None:
        """Test binding and clearing context."""
        bind_context(scope="whole_project", container="php-app")
        assert structlog.contextvars.get_contextvars() == {
            "scope": "whole_project",
            "container": "php-app",
        }
        structlog.contextvars.clear_contextvars()
        assert structlog.contextvars.get_contextvars() == {}

    def test_unbind_context(self) -> None:
        """Test unbinding specific context keys."""
        bind_context(key1="value1", key2="value2")
        unbind_context("key1")
        assert structlog.contextvars.get_contextvars() == {"key2": "value2"}
        structlog.contextvars.clear_contextvars()


class TestLogEventNames:
    """Tests for event name constants."""

    def test_event_names_are_snake_case(self) -> None:
        names = [
            value
            for key, value in vars(LogEventNames).items()
            if key.isupper() and isinstance(value, str)
        ]
        assert names
        assert all(name == name.lower() and " " not in name for name in names)


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_levels(self) -> None:
        """Test that all expected log levels exist."""
        assert [level.value for level in LogLevel] == [
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ]


class TestLogFormat:
    """Tests for LogFormat enum."""

    def test_log_formats(self) -> None:
        """Test that all expected formats exist."""
        assert LogFormat.JSON.value == "json"
        assert LogFormat.CONSOLE.value == "console"
