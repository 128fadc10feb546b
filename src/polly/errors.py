"""Exception hierarchy for Polly."""

from __future__ import annotations

from pathlib import Path


class PollyError(Exception):
    """Base class for errors raised by Polly itself."""


class PidFileParseError(PollyError, ValueError):
    """The pid file exists but does not hold a base-10 integer."""

    def __init__(self, path: Path, content: str) -> None:
        super().__init__(f"invalid pid in {path}: {content!r}")
        self.path = path
        self.content = content
