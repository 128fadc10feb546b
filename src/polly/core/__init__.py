"""Core utilities: prefix, paths, pid file, log files and install wrappers."""

from .install import InstallInvoker, InstallResult
from .logfiles import LogWriterFactory, TeeWriter
from .paths import PathKind, PathResolver, ResolvedPath
from .pidfile import PidFileManager, is_running
from .prefix import PrefixStore

__all__ = [
    "InstallInvoker",
    "InstallResult",
    "LogWriterFactory",
    "PathKind",
    "PathResolver",
    "PidFileManager",
    "PrefixStore",
    "ResolvedPath",
    "TeeWriter",
    "is_running",
]
