"""Append-mode writers for files in the Polly log directory."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .paths import PathResolver


class TeeWriter:
    """Duplicate every write to standard output and an open log file."""

    def __init__(self, log_handle: TextIO, stream: TextIO | None = None) -> None:
        self.log_handle = log_handle
        self.stream = stream if stream is not None else sys.stdout

    def write(self, data: str) -> int:
        self.stream.write(data)
        written = self.log_handle.write(data)
        # Keep the file in step with the unbuffered terminal side.
        self.log_handle.flush()
        return written

    def writelines(self, lines) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        self.stream.flush()
        self.log_handle.flush()

    def close(self) -> None:
        """Close the log file; standard output is left open."""

        self.stream.flush()
        self.log_handle.close()

    @property
    def closed(self) -> bool:
        return self.log_handle.closed

    def __enter__(self) -> TeeWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class LogWriterFactory:
    """Opens named log files under the resolved log directory."""

    def __init__(self, paths: PathResolver) -> None:
        self.paths = paths

    def log_file(self, name: str) -> TextIO:
        """Open (creating if needed) ``name`` for append; raises ``OSError``."""

        return Path(self.paths.log_file_path(name)).open("a", encoding="utf-8")

    def stdout_and_log_file(self, name: str, stream: TextIO | None = None) -> TeeWriter:
        """Return a writer to standard output and ``name``.

        Fails as a whole when the log file cannot be opened.
        """

        return TeeWriter(self.log_file(name), stream)
