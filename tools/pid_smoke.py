"""Quick smoke-test for the pid file round trip."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from polly.runtime import build_runtime
from polly.utils.logging_setup import setup_logging

log = logging.getLogger("polly.pidfile.smoke")


def main() -> int:
    load_dotenv()
    setup_logging()
    runtime = build_runtime()
    try:
        path = runtime.pids.write_pid_file()
        pid = runtime.pids.read_pid_file()
    except (OSError, ValueError):
        log.exception("pid file round trip failed")
        return 1
    print(f"{path}: {pid}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
