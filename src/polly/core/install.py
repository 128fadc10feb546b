"""Wrappers around the system ``install`` command."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .metrics import METRICS

INSTALL_BIN = "install"
ROOT_OWNER_ARGS = ("-o", "0", "-g", "0")

log = logging.getLogger("polly.install")

Runner = Callable[..., Any]


@dataclass(frozen=True)
class InstallResult:
    """Outcome of one ``install`` invocation.

    ``returncode`` is ``None`` when the command could not be spawned at all,
    in which case ``error`` holds the reason.
    """

    args: tuple[str, ...]
    returncode: int | None
    stderr: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class InstallInvoker:
    """Runs ``install`` and reports failures as values, never as exceptions."""

    def __init__(self, runner: Runner | None = None, binary: str = INSTALL_BIN) -> None:
        self._runner = runner or subprocess.run
        self.binary = binary

    def _run(self, args: Sequence[str]) -> InstallResult:
        command = [self.binary, *args]
        kwargs: dict[str, Any] = {"capture_output": True, "text": True, "check": False}
        try:
            completed = self._runner(command, **kwargs)
        except OSError as exc:
            result = InstallResult(tuple(args), None, error=str(exc))
        else:
            result = InstallResult(tuple(args), completed.returncode, completed.stderr or "")
        if not result.ok:
            METRICS.increment_counter("install_failures_total")
            log.warning(
                "install failed args=%s returncode=%s error=%s",
                " ".join(args),
                result.returncode,
                result.error or result.stderr.strip() or "-",
            )
        return result

    def install(self, *args: str) -> InstallResult:
        return self._run(args)

    def install_chown_root(self, *args: str) -> InstallResult:
        """Install with the target owned by the root user and group."""

        return self._run((*ROOT_OWNER_ARGS, *args))

    def install_dir_chown_root(self, dir_path: str) -> InstallResult:
        return self.install_chown_root("-d", str(dir_path))
