"""Build metadata and the version banner."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from email.utils import formatdate
from pathlib import Path
from typing import TextIO

from . import __version__
from .settings import AppSettings, get_settings


def epoch_to_rfc1123(epoch: int) -> str:
    """Format a Unix timestamp like ``Mon, 02 Jan 2006 15:04:05 GMT``."""

    return formatdate(float(epoch), usegmt=True)


def executable_path() -> str:
    """Absolute path of the running program."""

    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return str(Path(argv0).resolve())


@dataclass(frozen=True)
class BuildInfo:
    binary: str
    semver: str
    os_arch: str
    branch: str
    commit: str
    epoch: int

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> BuildInfo:
        cfg = settings or get_settings()
        return cls(
            binary=executable_path(),
            semver=__version__,
            os_arch=f"{platform.system()}-{platform.machine()}",
            branch=cfg.build_branch,
            commit=cfg.build_commit,
            epoch=cfg.build_epoch,
        )

    @property
    def formed(self) -> str:
        return epoch_to_rfc1123(self.epoch)


def print_version(out: TextIO | None = None, info: BuildInfo | None = None) -> None:
    """Write the six-line version banner to ``out`` (stdout by default)."""

    stream = out if out is not None else sys.stdout
    build = info or BuildInfo.from_settings()
    stream.write(f"Binary: {build.binary}\n")
    stream.write(f"SemVer: {build.semver}\n")
    stream.write(f"OsArch: {build.os_arch}\n")
    stream.write(f"Branch: {build.branch}\n")
    stream.write(f"Commit: {build.commit}\n")
    stream.write(f"Formed: {build.formed}\n")
