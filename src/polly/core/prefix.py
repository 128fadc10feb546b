"""The installation prefix every Polly path is rooted under."""

from __future__ import annotations

import os
from threading import Lock


def _is_unset(value: str) -> bool:
    return value in ("", os.sep)


def normalise_prefix(value: str | os.PathLike[str] | None) -> str:
    """Map ``None``, ``""`` and the filesystem root to the empty prefix."""

    if value is None:
        return ""
    text = os.fspath(value)
    return "" if _is_unset(text) else text


class PrefixStore:
    """Holds the prefix string and a generation counter bumped on every change.

    Resolvers compare the generation they cached under with the current one,
    so a single ``set`` invalidates every derived path at once.
    """

    def __init__(self, initial: str | os.PathLike[str] | None = "") -> None:
        self._lock = Lock()
        self._prefix = normalise_prefix(initial)
        self._generation = 0

    def get(self) -> str:
        with self._lock:
            return self._prefix

    def set(self, value: str | os.PathLike[str]) -> bool:
        """Replace the prefix, returning ``False`` when ``value`` is empty or root."""

        text = os.fspath(value)
        if _is_unset(text):
            return False
        with self._lock:
            self._prefix = text
            self._generation += 1
        return True

    def is_set(self) -> bool:
        with self._lock:
            return not _is_unset(self._prefix)

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def snapshot(self) -> tuple[str, int]:
        """Return the prefix and its generation read under one lock."""

        with self._lock:
            return self._prefix, self._generation
