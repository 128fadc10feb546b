"""Polly command-line interface."""

from __future__ import annotations

import logging
from typing import Any, Optional

import typer

from polly.core.logging import log_event
from polly.core.metrics import snapshot_kpis
from polly.core.paths import DIR_KINDS, PathKind
from polly.errors import PidFileParseError
from polly.runtime import Runtime, get_runtime
from polly.settings import get_settings
from polly.utils.logging_setup import setup_logging
from polly.version import print_version

app = typer.Typer(name="polly", help="Polly runtime paths and process identity.")
pid_app = typer.Typer(help="Write and inspect the pid file.")
log_cli_app = typer.Typer(help="Append to files in the log directory.")

app.add_typer(pid_app, name="pid")
app.add_typer(log_cli_app, name="log")

log = logging.getLogger("polly.cli")


@app.callback()
def main() -> None:
    setup_logging(get_settings().log_level)


def _runtime(prefix: str | None = None) -> Runtime:
    runtime = get_runtime()
    if prefix:
        runtime.set_prefix(prefix)
    return runtime


def _record(runtime: Runtime, topic: str, message: str, level: str = "INFO", **fields: Any) -> None:
    """Write a CLI event; an unwritable event log only produces a warning."""

    try:
        log_event("cli", topic, message, level=level, runtime=runtime, **fields)
    except OSError as exc:
        log.warning("could not record event topic=%s error=%s", topic, exc)


@app.command()
def version() -> None:
    """Print the Polly version banner."""

    print_version()


@app.command()
def paths(
    prefix: Optional[str] = typer.Option(None, "--prefix", "-p", help="Override POLLY_HOME."),
) -> None:
    """Resolve and print every standard path."""

    runtime = _runtime(prefix)
    typer.echo(f"prefix: {runtime.prefix.get() or '-'}")
    for kind in (*DIR_KINDS, PathKind.PID_FILE, PathKind.BIN_FILE):
        resolved = runtime.paths.resolve(kind)
        typer.echo(f"{kind.value}: {resolved.path}")
    warnings = runtime.paths.warnings()
    for kind, warning in warnings.items():
        typer.secho(f"warning {kind.value}: {warning}", err=True, fg=typer.colors.YELLOW)
    counters = snapshot_kpis()["counters"]
    typer.echo(f"Summary: warnings={len(warnings)} total_warnings={counters['path_warnings_total']}")


@pid_app.command("write")
def pid_write(
    pid: int = typer.Option(-1, "--pid", help="PID to record; negative means this process."),
) -> None:
    runtime = _runtime()
    try:
        path = runtime.pids.write_pid_file(pid)
    except OSError as exc:
        typer.secho(f"failed to write pid file: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1)
    _record(runtime, "pid.write", "pid file written", path=path)
    typer.echo(str(path))


@pid_app.command("read")
def pid_read() -> None:
    runtime = _runtime()
    try:
        pid = runtime.pids.read_pid_file()
    except PidFileParseError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(2)
    except OSError as exc:
        typer.secho(f"failed to read pid file: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.echo(str(pid))


@pid_app.command("status")
def pid_status() -> None:
    pid = _runtime().pids.running_pid()
    if pid is None:
        typer.echo("polly: stopped")
        raise typer.Exit(1)
    typer.echo(f"polly: running pid={pid}")


@log_cli_app.command("write")
def log_write(
    name: str = typer.Argument(..., help="Log file name inside the log directory."),
    message: str = typer.Argument(..., help="Line to append."),
    tee: bool = typer.Option(False, "--tee", help="Also echo the line to stdout."),
) -> None:
    runtime = _runtime()
    try:
        writer = runtime.logs.stdout_and_log_file(name) if tee else runtime.logs.log_file(name)
    except OSError as exc:
        typer.secho(f"failed to open log file: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1)
    with writer:
        writer.write(message + "\n")


@app.command("install-dir")
def install_dir(dir_path: str = typer.Argument(..., help="Directory to create as root:root.")) -> None:
    """Create a root-owned directory with the system install command."""

    runtime = _runtime()
    result = runtime.installer.install_dir_chown_root(dir_path)
    level = "INFO" if result.ok else "WARN"
    _record(
        runtime,
        "install.dir",
        "install command executed",
        level=level,
        target=dir_path,
        returncode=result.returncode,
    )
    if not result.ok:
        detail = result.error or result.stderr.strip() or f"exit {result.returncode}"
        typer.secho(f"install failed: {detail}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.echo(f"installed {dir_path}")
