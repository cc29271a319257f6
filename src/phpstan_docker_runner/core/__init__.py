"""Core business logic components.

This module exports the main business logic classes:
- DockerPhpstanExecutor: Runs PHPStan inside the container
- ReportParser: Turns PHPStan's text report into diagnostics
- AnalysisRunner: Orchestrates one analysis run
"""

from phpstan_docker_runner.core.executor import DockerPhpstanExecutor
from phpstan_docker_runner.core.path_resolver import LocalFileSystem, resolve_report_path
from phpstan_docker_runner.core.report_parser import ParseContext, ReportParser
from phpstan_docker_runner.core.runner import AnalysisRunner

__all__ = [
    "AnalysisRunner",
    "DockerPhpstanExecutor",
    "LocalFileSystem",
    "ParseContext",
    "ReportParser",
    "resolve_report_path",
]
