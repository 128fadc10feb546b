"""Structured event log kept next to the service's own log files.

Each event is appended twice through :class:`LogWriterFactory`: once as a
``key=value`` line to ``polly.log`` and once as JSON to ``polly.jsonl``. Both
files are rotated by size before the write.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any

from polly.runtime import Runtime, get_runtime

from .metrics import METRICS

TEXT_LOG_NAME = "polly.log"
JSON_LOG_NAME = "polly.jsonl"

LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5
_WRITE_LOCK = Lock()

LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40, "CRITICAL": 50}
_ALIASES = {"WARNING": "WARN", "FATAL": "CRITICAL"}


def level_name(level: str) -> str:
    upper = level.upper()
    upper = _ALIASES.get(upper, upper)
    return upper if upper in LEVELS else "INFO"


@dataclass(frozen=True)
class Event:
    svc: str
    topic: str
    msg: str
    level: str = "INFO"
    corr_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    ts: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    pid: int = field(default_factory=os.getpid)

    def as_text(self) -> str:
        fields = {"level": self.level, "svc": self.svc, "topic": self.topic, "pid": self.pid}
        if self.corr_id:
            fields["corr_id"] = self.corr_id
        fields.update(self.extra)
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        return f'[{self.ts}] {pairs} msg="{self.msg}"\n'

    def as_json(self) -> str:
        record: dict[str, Any] = {
            "ts": self.ts,
            "level": self.level,
            "svc": self.svc,
            "topic": self.topic,
            "msg": self.msg,
            "pid": self.pid,
        }
        if self.corr_id:
            record["corr_id"] = self.corr_id
        if self.extra:
            record["extra"] = self.extra
        return json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str) + "\n"


def rotate(path: Path, max_bytes: int | None = None, backups: int | None = None) -> bool:
    """Shift ``path`` to ``path.1`` (and so on) once it reaches ``max_bytes``."""

    limit = LOG_MAX_BYTES if max_bytes is None else max_bytes
    keep = LOG_BACKUP_COUNT if backups is None else backups
    try:
        if path.stat().st_size < limit:
            return False
    except FileNotFoundError:
        return False

    chain = [path, *(path.with_name(f"{path.name}.{index}") for index in range(1, keep + 1))]
    chain[-1].unlink(missing_ok=True)
    for older, newer in zip(reversed(chain[:-1]), reversed(chain[1:])):
        if older.exists():
            older.replace(newer)
    return True


def log_event(
    svc: str,
    topic: str,
    message: str,
    *,
    level: str = "INFO",
    corr_id: str | None = None,
    runtime: Runtime | None = None,
    **fields: Any,
) -> Event:
    """Append ``message`` to the event logs; raises ``OSError`` if they are unwritable."""

    rt = runtime or get_runtime()
    event = Event(svc, topic, message, level_name(level), corr_id, dict(fields))
    targets = ((TEXT_LOG_NAME, event.as_text()), (JSON_LOG_NAME, event.as_json()))

    with _WRITE_LOCK:
        for name, payload in targets:
            rotate(Path(rt.paths.log_file_path(name)))
            with rt.logs.log_file(name) as handle:
                handle.write(payload)

    if LEVELS[event.level] >= LEVELS["ERROR"]:
        METRICS.record_error()
    return event
