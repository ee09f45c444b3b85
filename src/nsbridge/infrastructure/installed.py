"""Filesystem-backed record of installed packages.

The host keeps it at ``<vendor-dir>/composer/installed.json``, either as a
bare list of package entries or as ``{"packages": [...]}``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

from nsbridge.domain.packages import PackageReference

INSTALLED_RELATIVE_PATH = Path("composer") / "installed.json"

logger = logging.getLogger(__name__)


class InstalledRepositoryError(click.ClickException):
    """The installed-package record exists but cannot be parsed."""


class InstalledFilesystemRepository:
    """Read-only view of ``installed.json``.

    A missing file means nothing is installed yet.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @classmethod
    def for_vendor_dir(cls, vendor_dir: Path) -> InstalledFilesystemRepository:
        return cls(vendor_dir / INSTALLED_RELATIVE_PATH)

    @property
    def path(self) -> Path:
        return self._path

    def get_packages(self) -> list[PackageReference]:
        if not self._path.is_file():
            logger.debug("No installed-package record at %s", self._path)
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Could not read installed packages from {self._path}: {exc}"
            raise InstalledRepositoryError(msg) from exc

        entries: Any = data.get("packages", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            msg = f"Unexpected installed-package layout in {self._path}"
            raise InstalledRepositoryError(msg)

        return [_to_reference(entry) for entry in entries if _is_package_entry(entry)]

    def get_package_names(self) -> list[str]:
        return [package.name for package in self.get_packages()]


def _is_package_entry(entry: Any) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get("name"), str)


def _to_reference(entry: dict[str, Any]) -> PackageReference:
    # Lookups against the host use the normalized version when present.
    version = entry.get("version_normalized") or entry.get("version") or ""
    return PackageReference(name=entry["name"], version=str(version))
