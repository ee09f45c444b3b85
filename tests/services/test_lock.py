"""Tests for LockFileUpdater — nested in-process lock-only update."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from nsbridge.services.lock import LockFileUpdater, LockUpdateError, lock_update_active
from tests.fakes import HostCliRecorder, make_host_cli


class TestBuildArgs:
    def test_default_command(self, tmp_path: Path) -> None:
        updater = LockFileUpdater(lambda: click.Command("noop"), tmp_path)
        assert updater.build_args() == [
            "update",
            "--lock",
            "--no-scripts",
            "--working-dir",
            str(tmp_path),
        ]

    def test_custom_command(self, tmp_path: Path) -> None:
        updater = LockFileUpdater(
            lambda: click.Command("noop"), tmp_path, command=["update", "--lock"]
        )
        assert updater.build_args()[:2] == ["update", "--lock"]
        assert updater.build_args()[-2:] == ["--working-dir", str(tmp_path)]


class TestUpdate:
    def test_runs_host_update(self, tmp_path: Path) -> None:
        recorder = HostCliRecorder()
        LockFileUpdater(lambda: make_host_cli(recorder), tmp_path).update()
        assert recorder.calls == [{"lock": True, "no_scripts": True, "working_dir": tmp_path}]

    def test_factory_called_per_update(self, tmp_path: Path) -> None:
        recorder = HostCliRecorder()
        built: list[click.Command] = []

        def factory() -> click.Command:
            app = make_host_cli(recorder)
            built.append(app)
            return app

        updater = LockFileUpdater(factory, tmp_path)
        updater.update()
        updater.update()
        assert len(built) == 2
        assert len(recorder.calls) == 2

    def test_guard_set_only_during_nested_run(self, tmp_path: Path) -> None:
        seen: list[bool] = []
        recorder = HostCliRecorder(on_update=lambda: seen.append(lock_update_active()))

        assert lock_update_active() is False
        LockFileUpdater(lambda: make_host_cli(recorder), tmp_path).update()
        assert seen == [True]
        assert lock_update_active() is False

    def test_nested_update_not_repeated(self, tmp_path: Path) -> None:
        recorder = HostCliRecorder()
        updater = LockFileUpdater(lambda: make_host_cli(recorder), tmp_path)
        recorder.on_update = updater.update

        updater.update()

        assert len(recorder.calls) == 1

    def test_non_zero_exit(self, tmp_path: Path) -> None:
        recorder = HostCliRecorder(exit_code=2)
        updater = LockFileUpdater(lambda: make_host_cli(recorder), tmp_path)
        with pytest.raises(LockUpdateError, match="exited with status 2"):
            updater.update()
        assert lock_update_active() is False

    def test_click_exception_propagates(self, tmp_path: Path) -> None:
        def explode() -> None:
            raise click.ClickException("Your requirements could not be resolved")

        recorder = HostCliRecorder(on_update=explode)
        updater = LockFileUpdater(lambda: make_host_cli(recorder), tmp_path)
        with pytest.raises(LockUpdateError, match="could not be resolved") as excinfo:
            updater.update()
        assert "update --lock" in excinfo.value.format_message()
        assert lock_update_active() is False

    def test_abort_propagates(self, tmp_path: Path) -> None:
        def abort() -> None:
            raise click.Abort()

        recorder = HostCliRecorder(on_update=abort)
        with pytest.raises(LockUpdateError, match="aborted"):
            LockFileUpdater(lambda: make_host_cli(recorder), tmp_path).update()

    def test_unexpected_error_wrapped(self, tmp_path: Path) -> None:
        def crash() -> None:
            raise RuntimeError("disk full")

        recorder = HostCliRecorder(on_update=crash)
        with pytest.raises(LockUpdateError, match="disk full") as excinfo:
            LockFileUpdater(lambda: make_host_cli(recorder), tmp_path).update()
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert "update --lock" in excinfo.value.format_message()
        assert lock_update_active() is False
