"""Data models for the unit of code submitted to one analysis run."""

import os
from dataclasses import dataclass
from enum import Enum


class ScopeKind(Enum):
    """What an analysis run targets."""

    WHOLE_PROJECT = "whole_project"
    SINGLE_FILE = "single_file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class AnalysisScope:
    """The target of one analysis run.

    `path` is a local (workspace) path and is None only for WHOLE_PROJECT.
    """

    kind: ScopeKind
    path: str | None = None

    def __post_init__(self) -> None:
        if self.kind is ScopeKind.WHOLE_PROJECT and self.path is not None:
            raise ValueError("Whole-project scope does not take a path")
        if self.kind is not ScopeKind.WHOLE_PROJECT and not self.path:
            raise ValueError(f"{self.kind.value} scope requires a path")

    @classmethod
    def whole_project(cls) -> "AnalysisScope":
        """Scope covering the remote working directory."""
        return cls(ScopeKind.WHOLE_PROJECT)

    @classmethod
    def single_file(cls, path: str | os.PathLike[str]) -> "AnalysisScope":
        """Scope covering exactly one file."""
        return cls(ScopeKind.SINGLE_FILE, os.fspath(path))

    @classmethod
    def directory(cls, path: str | os.PathLike[str]) -> "AnalysisScope":
        """Scope covering one directory tree."""
        return cls(ScopeKind.DIRECTORY, os.fspath(path))

    @property
    def is_whole_project(self) -> bool:
        return self.kind is ScopeKind.WHOLE_PROJECT

    def describe(self) -> str:
        """Short human-readable label, used in logs."""
        if self.path is None:
            return self.kind.value
        return f"{self.kind.value}:{self.path}"
