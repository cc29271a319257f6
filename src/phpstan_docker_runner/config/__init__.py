"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    DockerConfig,
    FileLoggingConfig,
    LoggingConfig,
    PhpstanConfig,
    RunnerConfig,
    RuntimeConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "RunnerConfig",
    # Sections
    "DockerConfig",
    "PhpstanConfig",
    "RuntimeConfig",
    "LoggingConfig",
    "FileLoggingConfig",
]
