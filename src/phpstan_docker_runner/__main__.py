"""Entry point for running PHPStan in Docker from the command line.

This module provides the command-line front-end. It handles:
- Configuration loading
- Logging setup
- Wiring the runner to terminal adapters
- Rendering diagnostics and choosing the exit code
"""

import argparse
import asyncio
import json
import shlex
import sys
from pathlib import Path

import structlog

from phpstan_docker_runner._version import __version__
from phpstan_docker_runner.config.loader import load_config, validate_config
from phpstan_docker_runner.config.schema import RunnerConfig
from phpstan_docker_runner.models.scope import AnalysisScope

log = structlog.get_logger()

DEFAULT_CONFIG_NAME = ".phpstan-docker.yaml"

EXIT_NO_PROBLEMS = 0
EXIT_PROBLEMS_FOUND = 1
EXIT_RUN_FAILED = 2


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from phpstan_docker_runner.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.WARNING
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="phpstan-docker-runner",
        description="Run PHPStan inside a Docker container and report diagnostics",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: <workspace>/{DEFAULT_CONFIG_NAME})",
    )

    parser.add_argument(
        "-w",
        "--workspace",
        type=Path,
        default=Path.cwd(),
        help="Workspace root (default: current directory)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Diagnostics output format (default: text)",
    )

    parser.add_argument(
        "--output-log",
        type=Path,
        default=None,
        help="Write the command and raw PHPStan output to this file instead of stderr",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and print the command without running it",
    )

    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Check docker, the container and the workspace, then exit",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("project", help="Analyse the whole project")

    file_parser = subparsers.add_parser("file", help="Analyse one PHP file")
    file_parser.add_argument("path", type=Path)

    dir_parser = subparsers.add_parser("directory", help="Analyse one directory")
    dir_parser.add_argument("path", type=Path, nargs="?", default=None)

    saved_parser = subparsers.add_parser(
        "saved", help="Analyse a just-saved file if auto_run is enabled"
    )
    saved_parser.add_argument("path", type=Path)

    return parser.parse_args(argv)


def resolve_config(config_path: Path | None, workspace_root: Path) -> RunnerConfig:
    """Load the configuration file, or defaults if none exists.

    An explicit --config must exist; the default file is optional.
    """
    if config_path is not None:
        return load_config(config_path)

    default_path = workspace_root / DEFAULT_CONFIG_NAME
    if default_path.exists():
        return load_config(default_path)

    config = RunnerConfig()
    validate_config(config)
    return config


def resolve_target(path: Path | None, workspace_root: Path) -> str | None:
    """Absolute local path of a sub-command target.

    Relative targets are taken relative to the workspace root, not the
    current directory.
    """
    if path is None:
        return None
    if not path.is_absolute():
        path = workspace_root / path
    return str(path.resolve())


def scope_for_command(command: str, path: str | None, workspace_root: str) -> AnalysisScope:
    """Scope a sub-command would analyse."""
    if command == "project":
        return AnalysisScope.whole_project()
    if command == "directory":
        return AnalysisScope.directory(path or workspace_root)
    if path is None:
        raise ValueError(f"{command} requires a path")
    return AnalysisScope.single_file(path)


async def run_cli(args: argparse.Namespace) -> int:
    """Run the command selected on the command line.

    Returns:
        Exit code
    """
    from phpstan_docker_runner.adapters.console import (
        CollectingDiagnosticsSink,
        ConsoleNotifier,
        FileOutputLog,
        LoggingProgressReporter,
        StreamOutputLog,
    )
    from phpstan_docker_runner.core.executor import DockerPhpstanExecutor
    from phpstan_docker_runner.core.runner import AnalysisRunner
    from phpstan_docker_runner.models.outcome import RunStatus
    from phpstan_docker_runner.utils.async_helpers import ConfigurationError
    from phpstan_docker_runner.utils.logging import configure_logging

    workspace_root = str(args.workspace.resolve())

    try:
        config = resolve_config(args.config, args.workspace)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", error=str(e))
        return EXIT_RUN_FAILED
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return EXIT_RUN_FAILED

    if not args.debug:
        configure_logging(
            level=config.logging.level,
            log_format=config.logging.format,
            file_path=config.logging.file.path if config.logging.file.enabled else None,
            file_enabled=config.logging.file.enabled,
        )

    if args.health_check:
        from phpstan_docker_runner.utils.health import HealthChecker

        report = await HealthChecker(config, workspace_root).run_all_checks()
        print(json.dumps(report.to_dict(), indent=2))
        return EXIT_NO_PROBLEMS if report.healthy else EXIT_RUN_FAILED

    if args.command is None:
        log.error("no_command_given", choices=["project", "file", "directory", "saved"])
        return EXIT_RUN_FAILED

    try:
        executor = DockerPhpstanExecutor.from_config(config)
    except ConfigurationError as e:
        ConsoleNotifier().error(f"Error running PHPStan: {e}")
        return EXIT_RUN_FAILED

    sink = CollectingDiagnosticsSink()
    output = FileOutputLog(str(args.output_log)) if args.output_log else StreamOutputLog()
    runner = AnalysisRunner(
        config,
        executor,
        sink,
        output,
        LoggingProgressReporter(),
        ConsoleNotifier(),
    )

    path = resolve_target(getattr(args, "path", None), args.workspace.resolve())

    if args.dry_run:
        scope = scope_for_command(args.command, path, workspace_root)
        print(shlex.join(executor.build_command(runner.build_request(scope, workspace_root))))
        return EXIT_NO_PROBLEMS

    if args.command == "project":
        outcome = await runner.run_project(workspace_root)
    elif args.command == "file":
        outcome = await runner.run_file(path, workspace_root)
    elif args.command == "directory":
        outcome = await runner.run_directory(path, workspace_root)
    else:
        saved = await runner.on_file_saved(path or "", workspace_root)
        if saved is None:
            log.info("auto_run_disabled_or_not_php", path=path)
            return EXIT_NO_PROBLEMS
        outcome = saved

    if outcome.status is not RunStatus.COMPLETED:
        return EXIT_RUN_FAILED

    if args.output == "json":
        print(sink.render_json())
    elif sink.diagnostics:
        print(sink.render_text(relative_to=workspace_root))

    return EXIT_NO_PROBLEMS if outcome.diagnostics.is_empty else EXIT_PROBLEMS_FOUND


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return asyncio.run(run_cli(args))
    except KeyboardInterrupt:
        log.info("interrupted")
        return EXIT_RUN_FAILED


if __name__ == "__main__":
    sys.exit(main())
