from __future__ import annotations

import logging
import os
import stat
import threading
from pathlib import Path

import pytest

from polly.core import paths as paths_module
from polly.core.metrics import METRICS
from polly.core.paths import DIR_KINDS, PathKind, PathResolver, dir_suffix
from polly.core.prefix import PrefixStore


def _resolver(prefix: Path | str) -> PathResolver:
    return PathResolver(PrefixStore(str(prefix)))


def test_directories_are_rooted_under_prefix(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    assert resolver.etc_dir_path() == f"{tmp_path}/etc/polly"
    assert resolver.run_dir_path() == f"{tmp_path}/var/run/polly"
    assert resolver.log_dir_path() == f"{tmp_path}/var/log/polly"
    assert resolver.lib_dir_path() == f"{tmp_path}/var/lib/polly"
    assert resolver.bin_dir_path() == f"{tmp_path}/usr/bin"
    for kind in DIR_KINDS:
        resolved = resolver.resolve(kind)
        assert resolved.path.startswith(str(tmp_path))
        assert Path(resolved.path).is_dir()
        assert resolved.ok


def test_non_canonical_prefix_is_kept_verbatim(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    resolver = _resolver("./data")

    for kind in DIR_KINDS:
        assert resolver.resolve(kind).path.startswith("./data/")
    assert resolver.pid_file_path() == "./data/var/run/polly/polly.pid"
    assert (tmp_path / "data/etc/polly").is_dir()

    dotted = f"{tmp_path}/./srv"
    resolver = _resolver(dotted)
    assert resolver.etc_dir_path() == f"{dotted}/etc/polly"


def test_file_paths(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    assert resolver.pid_file_path() == f"{tmp_path}/var/run/polly/polly.pid"
    assert resolver.bin_file_path() == f"{tmp_path}/usr/bin/polly"
    assert resolver.etc_file_path("polly.yml") == f"{tmp_path}/etc/polly/polly.yml"
    assert resolver.log_file_path("a.log") == f"{tmp_path}/var/log/polly/a.log"
    assert resolver.lib_file_path("state.db") == f"{tmp_path}/var/lib/polly/state.db"


def test_every_created_level_gets_dir_mode(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path / "p")
    previous = os.umask(0)
    try:
        resolver.etc_dir_path()
    finally:
        os.umask(previous)

    for directory in (tmp_path / "p", tmp_path / "p/etc", tmp_path / "p/etc/polly"):
        assert stat.S_IMODE(directory.stat().st_mode) == 0o755


def test_existing_parents_are_left_alone(tmp_path: Path) -> None:
    existing = tmp_path / "p/var"
    existing.mkdir(parents=True)
    existing.chmod(0o700)

    _resolver(tmp_path / "p").run_dir_path()

    assert stat.S_IMODE(existing.stat().st_mode) == 0o700
    assert (existing / "run/polly").is_dir()


def test_resolution_is_memoized(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[str] = []
    real_ensure = paths_module._ensure_dir

    def counting(path: str) -> None:
        created.append(path)
        real_ensure(path)

    monkeypatch.setattr(paths_module, "_ensure_dir", counting)
    resolver = _resolver(tmp_path)

    first = resolver.log_dir_path()
    second = resolver.log_dir_path()

    assert first == second
    assert created == [f"{tmp_path}/var/log/polly"]

    resolver.pid_file_path()
    resolver.pid_file_path()
    assert created.count(f"{tmp_path}/var/run/polly") == 1


def test_set_invalidates_cached_paths(tmp_path: Path) -> None:
    store = PrefixStore(str(tmp_path / "one"))
    resolver = PathResolver(store)
    assert resolver.run_dir_path() == f"{tmp_path}/one/var/run/polly"
    assert resolver.pid_file_path() == f"{tmp_path}/one/var/run/polly/polly.pid"

    store.set(str(tmp_path / "two"))

    assert resolver.run_dir_path() == f"{tmp_path}/two/var/run/polly"
    assert resolver.pid_file_path() == f"{tmp_path}/two/var/run/polly/polly.pid"
    assert resolver.bin_file_path() == f"{tmp_path}/two/usr/bin/polly"


def test_noop_set_keeps_prefix(tmp_path: Path) -> None:
    store = PrefixStore(str(tmp_path))
    resolver = PathResolver(store)
    etc = resolver.etc_dir_path()

    store.set("")
    store.set("/")

    assert resolver.etc_dir_path() == etc


def test_creation_failure_is_soft(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    METRICS.reset()

    def failing(path: str) -> None:
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(paths_module, "_ensure_dir", failing)
    monkeypatch.setattr(paths_module, "readable", lambda path: False)
    monkeypatch.setattr(paths_module, "writable", lambda path: False)
    resolver = _resolver(tmp_path)

    with caplog.at_level(logging.WARNING, logger="polly.paths"):
        resolved = resolver.resolve(PathKind.RUN)

    assert resolved.path == f"{tmp_path}/var/run/polly"
    assert resolved.ok is False
    assert "Permission denied" in (resolved.warning or "")
    assert "not writable" in (resolved.warning or "")
    assert "missing r|w access run dir" in caplog.text
    assert f"{tmp_path}/var/run/polly" in caplog.text
    assert resolver.warnings() == {PathKind.RUN: resolved.warning}
    assert METRICS.get_counter("path_warnings_total") == 1

    # Cached: the warning is not emitted twice.
    resolver.resolve(PathKind.RUN)
    assert METRICS.get_counter("path_warnings_total") == 1


def test_file_in_the_way_is_a_warning(tmp_path: Path) -> None:
    (tmp_path / "etc").write_text("not a directory", encoding="utf-8")

    resolved = _resolver(tmp_path).resolve(PathKind.ETC)

    assert resolved.path == f"{tmp_path}/etc/polly"
    assert resolved.ok is False


def test_etc_only_requires_read_access(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(paths_module, "writable", lambda path: False)
    resolver = _resolver(tmp_path)

    assert resolver.resolve(PathKind.ETC).ok
    assert resolver.resolve(PathKind.LIB).ok
    assert not resolver.resolve(PathKind.LOG).ok


def test_unprefixed_uses_system_locations() -> None:
    assert dir_suffix(PathKind.RUN) == "/var/run/polly"
    assert dir_suffix(PathKind.BIN, service="other") == "/usr/bin"
    with pytest.raises(ValueError):
        dir_suffix(PathKind.PID_FILE)


def test_concurrent_resolution_sees_latest_prefix(tmp_path: Path) -> None:
    store = PrefixStore(str(tmp_path / "a"))
    resolver = PathResolver(store)
    results: list[str] = []

    def worker() -> None:
        for _ in range(20):
            results.append(resolver.lib_dir_path())

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    store.set(str(tmp_path / "b"))
    for thread in threads:
        thread.join()

    assert set(results) <= {f"{tmp_path}/a/var/lib/polly", f"{tmp_path}/b/var/lib/polly"}
    assert resolver.lib_dir_path() == f"{tmp_path}/b/var/lib/polly"
