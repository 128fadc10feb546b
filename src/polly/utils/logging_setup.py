"""Central logging configuration for Polly."""

from __future__ import annotations

import logging
from typing import Any

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int | str = logging.INFO, *, fmt: str = DEFAULT_FORMAT, **kwargs: Any) -> None:
    """Ensure the root logger has at least one handler configured."""
    root = logging.getLogger()
    if root.handlers:
        return
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=fmt, **kwargs)
