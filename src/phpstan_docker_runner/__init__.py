"""Run PHPStan inside a Docker container and map its report to workspace files."""

from phpstan_docker_runner._version import __version__

__all__ = ["__version__"]
