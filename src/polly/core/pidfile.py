"""Pid file helpers for locating the running Polly instance."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from polly.errors import PidFileParseError

from .metrics import METRICS
from .paths import PathResolver

_PID_PATTERN = re.compile(r"[+-]?[0-9]+")

log = logging.getLogger("polly.pidfile")


def is_running(pid: int) -> bool:
    """Return whether the provided PID appears active."""

    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by another user.
        return True
    except OSError:
        return False
    return True


class PidFileManager:
    """Writes and reads the decimal PID stored at the resolved pid file path.

    There is no locking: concurrent writers race and the last one wins.
    """

    def __init__(self, paths: PathResolver) -> None:
        self.paths = paths

    @property
    def path(self) -> Path:
        return Path(self.paths.pid_file_path())

    def write_pid_file(self, pid: int = -1) -> Path:
        """Write ``pid`` (or the current PID when negative), replacing any content."""

        if pid < 0:
            pid = os.getpid()
        path = self.path
        path.write_text(str(pid), encoding="ascii")
        METRICS.increment_counter("pid_writes_total")
        log.debug("Wrote pid %s to %s", pid, path)
        return path

    def read_pid_file(self) -> int:
        """Return the stored PID.

        Raises ``OSError`` when the file cannot be read and
        :class:`PidFileParseError` when it does not hold an integer.
        """

        path = self.path
        content = path.read_text(encoding="ascii", errors="replace")
        text = content.strip()
        if not _PID_PATTERN.fullmatch(text):
            raise PidFileParseError(path, content)
        return int(text)

    def running_pid(self) -> int | None:
        """Return the stored PID if that process is alive, otherwise ``None``."""

        try:
            pid = self.read_pid_file()
        except (OSError, PidFileParseError):
            return None
        return pid if is_running(pid) else None
