"""Shared pytest fixtures and test helpers for nsbridge tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from nsbridge.config.settings import BridgeSettings
from tests.fakes import FakeHost, FakeInstallationManager, FakeRepositoryManager


@pytest.fixture(autouse=True)
def _no_manifest_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's COMPOSER / NSBRIDGE_* env out of every test."""
    monkeypatch.delenv("COMPOSER", raising=False)
    for key in ("NSBRIDGE_VERBOSE", "NSBRIDGE_LOG_JSON", "NSBRIDGE_VENDOR_DIR"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() after each test (plugin activation calls it)."""
    root = logging.getLogger()
    original_level = root.level
    bridge = logging.getLogger("nsbridge")
    bridge_level = bridge.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(original_level)
    bridge.setLevel(bridge_level)
    structlog.reset_defaults()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project with an empty vendor directory."""
    (tmp_path / "vendor" / "composer").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def repository_manager() -> FakeRepositoryManager:
    return FakeRepositoryManager()


@pytest.fixture
def installation_manager() -> FakeInstallationManager:
    return FakeInstallationManager()


@pytest.fixture
def host(
    repository_manager: FakeRepositoryManager,
    installation_manager: FakeInstallationManager,
) -> FakeHost:
    return FakeHost(repository_manager, installation_manager)


@pytest.fixture
def settings(project_root: Path) -> BridgeSettings:
    write_manifest(project_root, {"name": "acme/app", "require": {}})
    return BridgeSettings.discover(manifest_path=project_root / "composer.json")


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_manifest(root: Path, definition: dict[str, Any]) -> Path:
    path = root / "composer.json"
    path.write_text(json.dumps(definition, indent=4) + "\n", encoding="utf-8")
    return path


def read_manifest(root: Path) -> dict[str, Any]:
    return json.loads((root / "composer.json").read_text(encoding="utf-8"))


def write_installed(root: Path, packages: list[tuple[str, str]], *, flat: bool = False) -> Path:
    """Write ``vendor/composer/installed.json`` in either host format."""
    entries = [
        {"name": name, "version": version, "version_normalized": version}
        for name, version in packages
    ]
    path = root / "vendor" / "composer" / "installed.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: Any = entries if flat else {"packages": entries, "dev": True}
    path.write_text(json.dumps(payload, indent=4), encoding="utf-8")
    return path
