"""Wiring of the prefix, path resolver and the helpers built on it."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from .core.install import InstallInvoker
from .core.logfiles import LogWriterFactory
from .core.paths import PathResolver
from .core.pidfile import PidFileManager
from .core.prefix import PrefixStore
from .settings import AppSettings, get_settings


@dataclass
class Runtime:
    """Context object passed to anything that needs Polly paths."""

    prefix: PrefixStore
    paths: PathResolver
    pids: PidFileManager
    logs: LogWriterFactory
    installer: InstallInvoker

    def set_prefix(self, value: str | os.PathLike[str]) -> bool:
        return self.prefix.set(value)


def build_runtime(
    settings: AppSettings | None = None,
    *,
    prefix: str | os.PathLike[str] | None = None,
    installer: InstallInvoker | None = None,
) -> Runtime:
    """Create a fresh runtime; ``prefix`` overrides ``POLLY_HOME``."""

    cfg = settings or get_settings()
    store = PrefixStore(cfg.home)
    if prefix is not None:
        store.set(prefix)
    paths = PathResolver(store, service=cfg.service_name)
    return Runtime(
        prefix=store,
        paths=paths,
        pids=PidFileManager(paths),
        logs=LogWriterFactory(paths),
        installer=installer or InstallInvoker(),
    )


@lru_cache(maxsize=1)
def get_runtime() -> Runtime:
    """Return the process-wide runtime built from the cached settings."""

    return build_runtime()
