"""Tests for BridgeSettings — unified settings with the manifest source."""

from __future__ import annotations

from pathlib import Path

import pytest

from nsbridge.config.models import DEFAULT_LOCK_COMMAND, LockUpdateConfig, RewriteConfig
from nsbridge.config.settings import BridgeSettings
from nsbridge.infrastructure.manifest import ManifestError
from tests.conftest import write_manifest


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = BridgeSettings.discover(working_dir=tmp_path)
        assert settings.manifest_path == tmp_path / "composer.json"
        assert settings.working_dir == tmp_path
        assert settings.vendor_dir == Path("vendor")
        assert settings.resolved_vendor_dir == tmp_path / "vendor"
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.rewrite == RewriteConfig()
        assert settings.lock_update.enabled is True
        assert settings.lock_update.command == DEFAULT_LOCK_COMMAND

    def test_frozen(self, tmp_path: Path) -> None:
        settings = BridgeSettings.discover(working_dir=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestManifestSource:
    def test_working_dir_follows_manifest(self, tmp_path: Path) -> None:
        write_manifest(tmp_path, {"name": "acme/app"})
        nested = tmp_path / "module"
        nested.mkdir()
        settings = BridgeSettings.discover(working_dir=nested)
        assert settings.manifest_path == (tmp_path / "composer.json").resolve()
        assert settings.working_dir == tmp_path.resolve()

    def test_vendor_dir_from_config(self, tmp_path: Path) -> None:
        write_manifest(tmp_path, {"config": {"vendor-dir": "lib/vendor"}})
        settings = BridgeSettings.discover(manifest_path=tmp_path / "composer.json")
        assert settings.resolved_vendor_dir == tmp_path / "lib" / "vendor"

    def test_absolute_vendor_dir(self, tmp_path: Path) -> None:
        vendor = tmp_path / "shared-vendor"
        write_manifest(tmp_path, {"config": {"vendor-dir": str(vendor)}})
        settings = BridgeSettings.discover(manifest_path=tmp_path / "composer.json")
        assert settings.resolved_vendor_dir == vendor

    def test_extra_section_kebab_case(self, tmp_path: Path) -> None:
        write_manifest(
            tmp_path,
            {
                "extra": {
                    "nsbridge": {
                        "lock-update": {"enabled": False},
                        "rewrite": {"pool-interception": False},
                    }
                }
            },
        )
        settings = BridgeSettings.discover(manifest_path=tmp_path / "composer.json")
        assert settings.lock_update.enabled is False
        assert settings.rewrite.pool_interception is False
        assert settings.rewrite.install_tracking is True

    def test_custom_lock_command(self, tmp_path: Path) -> None:
        write_manifest(
            tmp_path,
            {"extra": {"nsbridge": {"lock_update": {"command": ["update", "--lock"]}}}},
        )
        settings = BridgeSettings.discover(manifest_path=tmp_path / "composer.json")
        assert settings.lock_update.command == ("update", "--lock")

    def test_other_extra_keys_ignored(self, tmp_path: Path) -> None:
        write_manifest(tmp_path, {"extra": {"branch-alias": {"dev-master": "1.0-dev"}}})
        settings = BridgeSettings.discover(manifest_path=tmp_path / "composer.json")
        assert settings.lock_update == LockUpdateConfig()

    def test_invalid_manifest_raises(self, tmp_path: Path) -> None:
        (tmp_path / "composer.json").write_text("{broken")
        with pytest.raises(ManifestError):
            BridgeSettings.discover(manifest_path=tmp_path / "composer.json")


class TestPriority:
    def test_env_overrides_manifest(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_manifest(tmp_path, {"config": {"vendor-dir": "lib"}})
        monkeypatch.setenv("NSBRIDGE_VENDOR_DIR", "deps")
        settings = BridgeSettings.discover(manifest_path=tmp_path / "composer.json")
        assert settings.vendor_dir == Path("deps")

    def test_env_nested(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NSBRIDGE_LOCK_UPDATE__ENABLED", "false")
        settings = BridgeSettings.discover(working_dir=tmp_path)
        assert settings.lock_update.enabled is False

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NSBRIDGE_VERBOSE", "true")
        settings = BridgeSettings.discover(working_dir=tmp_path, verbose=False)
        assert settings.verbose is False

    def test_kwargs_override_manifest(self, tmp_path: Path) -> None:
        write_manifest(tmp_path, {"extra": {"nsbridge": {"log-json": True}}})
        settings = BridgeSettings.discover(
            manifest_path=tmp_path / "composer.json", log_json=False
        )
        assert settings.log_json is False
