"""Maps file paths printed by PHPStan in the container to workspace paths.

PHPStan reports paths as it sees them inside the container, which may be
absolute container paths, paths relative to the container working directory,
or paths that happen to be identical on both sides (bind mounts). The
resolver tries each interpretation in turn against a filesystem oracle and
falls back to a search by file name.

The basename search has no tie-break between files sharing a name in
different directories: the first hit in traversal order wins. Treat that
result as best-effort.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from phpstan_docker_runner.models.scope import AnalysisScope, ScopeKind
from phpstan_docker_runner.utils.logging import LogEventNames

log = structlog.get_logger()

PHP_EXTENSION = ".php"


class FileSystem(Protocol):
    """Read-only view of the local filesystem used for path resolution."""

    def exists(self, path: str) -> bool:
        """Return True if anything exists at path."""
        ...

    def is_dir(self, path: str) -> bool:
        """Return True if path is an existing directory."""
        ...

    def find_file(self, root: str, name: str) -> str | None:
        """Return the first file called `name` below `root`, or None."""
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def find_file(self, root: str, name: str) -> str | None:
        """Depth-first search for a file by name.

        Entries of a directory are visited in name order and its files are
        matched before any sub-directory is entered. Symlinked directories
        are not followed and unreadable directories are skipped.
        """
        stack = [root]
        while stack:
            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda entry: entry.name)
            except OSError:
                continue

            subdirs: list[str] = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(entry.path)
                    elif entry.name == name:
                        return entry.path
                except OSError:
                    continue
            stack.extend(reversed(subdirs))
        return None


class ResolutionStrategy(Enum):
    """Which rule produced a resolved path."""

    KNOWN_FILE = "known_file"
    ABSOLUTE = "absolute"
    REMOTE_PREFIX = "remote_prefix"
    WORKSPACE_RELATIVE = "workspace_relative"
    BASENAME_SEARCH = "basename_search"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class PathResolution:
    """Outcome of resolving one reported path."""

    path: str
    strategy: ResolutionStrategy

    @property
    def resolved(self) -> bool:
        return self.strategy is not ResolutionStrategy.UNRESOLVED


def known_file(scope: AnalysisScope, fs: FileSystem) -> str | None:
    """Return the scope's file if the run targeted exactly one existing PHP file."""
    if (
        scope.kind is ScopeKind.SINGLE_FILE
        and scope.path is not None
        and scope.path.endswith(PHP_EXTENSION)
        and fs.exists(scope.path)
    ):
        return scope.path
    return None


def strip_remote_root(candidate: str, remote_root: str) -> str | None:
    """Return candidate relative to remote_root, or None if it lies outside.

    The prefix must end on a path boundary: `/var/www/html2/a.php` is not
    inside `/var/www/html`.
    """
    root = remote_root.rstrip("/")
    if candidate == root:
        return ""
    if candidate.startswith(root + "/"):
        return candidate[len(root) + 1 :]
    return None


def resolve_report_path(
    candidate: str,
    workspace_root: str,
    remote_root: str,
    scope: AnalysisScope,
    fs: FileSystem,
) -> PathResolution:
    """Resolve a path token from the report to a local path.

    Args:
        candidate: Path token as printed in the report.
        workspace_root: Local workspace root.
        remote_root: Working directory inside the container.
        scope: Scope of the run that produced the report.
        fs: Filesystem oracle.

    Returns:
        PathResolution. When nothing matches, the path joined onto the
        workspace root is returned with strategy UNRESOLVED.
    """
    target = known_file(scope, fs)
    if target is not None:
        return PathResolution(target, ResolutionStrategy.KNOWN_FILE)

    if os.path.isabs(candidate) and fs.exists(candidate):
        return PathResolution(candidate, ResolutionStrategy.ABSOLUTE)

    relative = strip_remote_root(candidate, remote_root)
    if relative is not None:
        joined = os.path.normpath(os.path.join(workspace_root, relative))
        strategy = ResolutionStrategy.REMOTE_PREFIX
    else:
        joined = os.path.normpath(os.path.join(workspace_root, candidate))
        strategy = ResolutionStrategy.WORKSPACE_RELATIVE

    if fs.exists(joined):
        return PathResolution(joined, strategy)

    search_root = workspace_root
    if scope.kind is ScopeKind.DIRECTORY and scope.path is not None and fs.is_dir(scope.path):
        search_root = scope.path

    found = fs.find_file(search_root, posix_basename(candidate))
    if found is not None:
        return PathResolution(found, ResolutionStrategy.BASENAME_SEARCH)

    log.debug(LogEventNames.FILE_HEADER_UNRESOLVED, candidate=candidate, fallback=joined)
    return PathResolution(joined, ResolutionStrategy.UNRESOLVED)


def posix_basename(path: str) -> str:
    """Base name of a path written with either separator."""
    return path.replace("\\", "/").rsplit("/", 1)[-1]
