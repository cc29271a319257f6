"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DockerConfig(BaseModel):
    """Container the analyzer runs in."""

    container_name: str = "phpstan"
    work_directory: str = "/var/www/html"
    docker_path: str | None = None

    @field_validator("container_name")
    @classmethod
    def validate_container_name(cls, v: str) -> str:
        """Reject empty or whitespace-containing container identifiers."""
        if not v or any(ch.isspace() for ch in v):
            raise ValueError(f"Invalid container name: {v!r}")
        return v

    @field_validator("work_directory")
    @classmethod
    def validate_work_directory(cls, v: str) -> str:
        """The remote working directory is an absolute POSIX path."""
        if not v.startswith("/"):
            raise ValueError(f"work_directory must be an absolute POSIX path: {v}")
        if len(v) > 1:
            v = v.rstrip("/")
        return v


class PhpstanConfig(BaseModel):
    """Analyzer invocation settings."""

    path: str = "vendor/bin/phpstan"
    config_file: str | None = "phpstan.neon"
    level: int = Field(5, ge=0, le=9)
    auto_run: bool = False
    no_progress: bool = True
    memory_limit: str | None = None

    @field_validator("config_file")
    @classmethod
    def empty_config_file_is_none(cls, v: str | None) -> str | None:
        """Treat an empty config file name as "not configured"."""
        return v or None


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("~/.cache/phpstan-docker-runner/runner.log").expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class RuntimeConfig(BaseModel):
    """Runtime configuration."""

    timeout: int = Field(600, ge=10, le=3600, description="Analyzer timeout in seconds")


class RunnerConfig(BaseSettings):
    """Root configuration for the PHPStan Docker Runner."""

    docker: DockerConfig = DockerConfig()
    phpstan: PhpstanConfig = PhpstanConfig()
    runtime: RuntimeConfig = RuntimeConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="PHPSTAN_DOCKER_",
        env_nested_delimiter="__",
    )
