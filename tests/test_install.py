from __future__ import annotations

import subprocess
from typing import Any

from polly.core.install import InstallInvoker
from polly.core.metrics import METRICS


class _Recorder:
    def __init__(self, returncode: int = 0, stderr: str = "") -> None:
        self.calls: list[list[str]] = []
        self.returncode = returncode
        self.stderr = stderr

    def __call__(self, command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(command)
        assert kwargs["check"] is False
        return subprocess.CompletedProcess(command, self.returncode, "", self.stderr)


def test_install_passes_arguments_through() -> None:
    runner = _Recorder()
    invoker = InstallInvoker(runner=runner)

    result = invoker.install("-m", "0644", "src", "dst")

    assert runner.calls == [["install", "-m", "0644", "src", "dst"]]
    assert result.ok
    assert result.args == ("-m", "0644", "src", "dst")


def test_install_dir_chown_root() -> None:
    runner = _Recorder()
    invoker = InstallInvoker(runner=runner)

    invoker.install_dir_chown_root("/etc/polly")

    assert runner.calls == [["install", "-o", "0", "-g", "0", "-d", "/etc/polly"]]


def test_failure_is_returned_not_raised() -> None:
    METRICS.reset()
    invoker = InstallInvoker(runner=_Recorder(returncode=1, stderr="install: bad owner\n"))

    result = invoker.install_chown_root("a", "b")

    assert result.ok is False
    assert result.returncode == 1
    assert "bad owner" in result.stderr
    assert METRICS.get_counter("install_failures_total") == 1


def test_spawn_error_is_returned() -> None:
    def missing(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(2, "No such file or directory", command[0])

    result = InstallInvoker(runner=missing).install("x")

    assert result.ok is False
    assert result.returncode is None
    assert "No such file" in (result.error or "")
