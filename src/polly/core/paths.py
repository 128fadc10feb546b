"""Standard Polly directories and files derived from the installation prefix.

Every directory is created (mode ``0755``) and access-checked the first time it
is resolved for a given prefix. Failures never propagate: they are logged,
counted and attached to the :class:`ResolvedPath` so callers that need write
access can inspect them, while the path itself is still returned.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from threading import RLock

from polly import SERVICE_NAME

from .metrics import METRICS
from .prefix import PrefixStore

DIR_MODE = 0o755

log = logging.getLogger("polly.paths")


class PathKind(str, Enum):
    ETC = "etc"
    RUN = "run"
    LOG = "log"
    LIB = "lib"
    BIN = "bin"
    PID_FILE = "pid_file"
    BIN_FILE = "bin_file"


DIR_KINDS = (PathKind.ETC, PathKind.RUN, PathKind.LOG, PathKind.LIB, PathKind.BIN)

# Directories the service must be able to write into, not just read.
_WRITABLE_KINDS = frozenset({PathKind.RUN, PathKind.LOG})


def dir_suffix(kind: PathKind, service: str = SERVICE_NAME) -> str:
    """Return the prefix-relative location of a directory kind."""

    suffixes = {
        PathKind.ETC: f"/etc/{service}",
        PathKind.RUN: f"/var/run/{service}",
        PathKind.LOG: f"/var/log/{service}",
        PathKind.LIB: f"/var/lib/{service}",
        PathKind.BIN: "/usr/bin",
    }
    try:
        return suffixes[kind]
    except KeyError:
        raise ValueError(f"{kind.value} is not a directory kind") from None


@dataclass(frozen=True)
class ResolvedPath:
    """A computed path plus the diagnostic recorded while resolving it.

    ``path`` is the literal ``prefix + suffix`` text; it is not normalised, so
    it always starts with the prefix exactly as configured.
    """

    kind: PathKind
    path: str
    warning: str | None = None

    @property
    def ok(self) -> bool:
        return self.warning is None


def readable(path: str | os.PathLike[str]) -> bool:
    return os.access(path, os.R_OK)


def writable(path: str | os.PathLike[str]) -> bool:
    return os.access(path, os.W_OK)


def _ensure_dir(path: str) -> None:
    """Create ``path`` and every missing parent with ``DIR_MODE``."""

    missing: list[Path] = []
    current = Path(path)
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent
    for directory in reversed(missing):
        try:
            directory.mkdir(mode=DIR_MODE)
        except FileExistsError:
            if not directory.is_dir():
                raise


class PathResolver:
    """Lazily computes and memoizes the standard Polly paths for a prefix."""

    def __init__(self, prefix: PrefixStore, service: str = SERVICE_NAME) -> None:
        self.prefix = prefix
        self.service = service
        self._lock = RLock()
        self._cache: dict[PathKind, ResolvedPath] = {}
        self._generation = prefix.generation

    def resolve(self, kind: PathKind | str) -> ResolvedPath:
        kind = PathKind(kind)
        with self._lock:
            prefix, generation = self.prefix.snapshot()
            if generation != self._generation:
                self._cache.clear()
                self._generation = generation
            cached = self._cache.get(kind)
            if cached is not None:
                return cached

            if kind is PathKind.PID_FILE:
                run_dir = self.resolve(PathKind.RUN).path
                resolved = ResolvedPath(kind, f"{run_dir}/{self.service}.pid")
            elif kind is PathKind.BIN_FILE:
                bin_dir = self.resolve(PathKind.BIN).path
                resolved = ResolvedPath(kind, f"{bin_dir}/{self.service}")
            else:
                resolved = self._resolve_dir(kind, prefix)
            self._cache[kind] = resolved
            return resolved

    def _resolve_dir(self, kind: PathKind, prefix: str) -> ResolvedPath:
        candidate = f"{prefix}{dir_suffix(kind, self.service)}"
        error: OSError | None = None
        try:
            _ensure_dir(candidate)
        except OSError as exc:
            error = exc

        need_write = kind in _WRITABLE_KINDS
        problems = []
        if error is not None:
            problems.append(str(error))
        if not readable(candidate):
            problems.append("not readable")
        if need_write and not writable(candidate):
            problems.append("not writable")
        if not problems:
            return ResolvedPath(kind, candidate)

        access = "r|w" if need_write else "r"
        warning = f"missing {access} access {kind.value} dir: {'; '.join(problems)}"
        log.warning("%s (path=%s)", warning, candidate)
        METRICS.increment_counter("path_warnings_total")
        return ResolvedPath(kind, candidate, warning)

    def warnings(self) -> dict[PathKind, str]:
        """Return the warnings of the entries cached for the current prefix."""

        with self._lock:
            if self.prefix.generation != self._generation:
                return {}
            return {
                kind: entry.warning
                for kind, entry in self._cache.items()
                if entry.warning is not None
            }

    def etc_dir_path(self) -> str:
        return self.resolve(PathKind.ETC).path

    def run_dir_path(self) -> str:
        return self.resolve(PathKind.RUN).path

    def log_dir_path(self) -> str:
        return self.resolve(PathKind.LOG).path

    def lib_dir_path(self) -> str:
        return self.resolve(PathKind.LIB).path

    def bin_dir_path(self) -> str:
        return self.resolve(PathKind.BIN).path

    def pid_file_path(self) -> str:
        return self.resolve(PathKind.PID_FILE).path

    def bin_file_path(self) -> str:
        return self.resolve(PathKind.BIN_FILE).path

    def etc_file_path(self, name: str) -> str:
        return f"{self.etc_dir_path()}/{name}"

    def log_file_path(self, name: str) -> str:
        return f"{self.log_dir_path()}/{name}"

    def lib_file_path(self, name: str) -> str:
        return f"{self.lib_dir_path()}/{name}"
