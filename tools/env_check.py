#!/usr/bin/env python3
"""Report the resolved Polly layout and any access problems as JSON."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from polly.core.paths import DIR_KINDS, PathKind
from polly.runtime import build_runtime
from polly.settings import AppSettings
from polly.utils.logging_setup import setup_logging


def main() -> None:
    load_dotenv()
    setup_logging()
    settings = AppSettings()
    runtime = build_runtime(settings)

    paths: dict[str, str] = {}
    missing: list[str] = []
    for kind in (*DIR_KINDS, PathKind.PID_FILE, PathKind.BIN_FILE):
        resolved = runtime.paths.resolve(kind)
        paths[kind.value] = str(resolved.path)
        if resolved.warning:
            missing.append(f"{kind.value}: {resolved.warning}")

    payload: dict[str, Any] = {
        "home": settings.home,
        "prefixed": runtime.prefix.is_set(),
        "paths": paths,
        "ok": not missing,
        "missing": missing,
    }

    sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    if missing:
        sys.exit(1)


if __name__ == "__main__":
    main()
