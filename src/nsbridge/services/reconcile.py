"""Post-install reconciliation.

Runs once after every install/update operation of a run. For each
deprecated package that slipped through:

1. root requirements naming it are renamed to the replacement in the
   manifest, constraint unchanged,
2. the package is uninstalled from the local repository and from disk.

The manifest is written back once if anything changed, then a lock-only
update re-resolves the lock file against the new state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nsbridge.domain.names import transform_package_name
from nsbridge.domain.operations import UninstallOperation
from nsbridge.domain.packages import PackageReference
from nsbridge.services.result import ServiceResult

if TYPE_CHECKING:
    from nsbridge.host import InstallationManager
    from nsbridge.infrastructure.manifest import ManifestFile
    from nsbridge.services.lock import LockFileUpdater
    from nsbridge.services.state import DeprecatedInstallRecord

ROOT_REQUIREMENT_SECTIONS: tuple[str, ...] = ("require", "require-dev")

logger = logging.getLogger(__name__)


def is_root_requirement(definition: dict[str, Any], name: str) -> bool:
    """Whether *name* appears in ``require`` or ``require-dev``."""
    for section in ROOT_REQUIREMENT_SECTIONS:
        requirements = definition.get(section)
        if isinstance(requirements, dict) and name in requirements:
            return True
    return False


def sort_packages_enabled(definition: dict[str, Any]) -> bool:
    config = definition.get("config")
    return isinstance(config, dict) and bool(config.get("sort-packages", False))


def update_root_requirements(
    definition: dict[str, Any],
    name: str,
    replacement: str,
) -> list[str]:
    """Rename *name* to *replacement* in every requirement section holding it.

    The replacement key takes the same constraint and is appended to the
    section, unless ``config.sort-packages`` asks for the section to be
    re-sorted. Mutates *definition*; returns the sections that changed.
    """
    sort_packages = sort_packages_enabled(definition)
    changed: list[str] = []

    for section in ROOT_REQUIREMENT_SECTIONS:
        requirements = definition.get(section)
        if not isinstance(requirements, dict) or name not in requirements:
            continue

        renamed = dict(requirements)
        renamed[replacement] = renamed[name]
        del renamed[name]
        if sort_packages:
            renamed = dict(sorted(renamed.items()))

        definition[section] = renamed
        changed.append(section)

    return changed


class PostInstallReconciler:
    """Clean up after deprecated packages the interceptors could not stop.

    Parameters:
        manifest: Root manifest, rewritten when a root requirement changes.
        record: Deprecated packages recorded during this run.
        lock_updater: Nested lock-only update, or None when disabled.
    """

    def __init__(
        self,
        manifest: ManifestFile,
        record: DeprecatedInstallRecord,
        lock_updater: LockFileUpdater | None,
    ) -> None:
        self._manifest = manifest
        self._record = record
        self._lock_updater = lock_updater

    def reconcile(
        self,
        installation_manager: InstallationManager,
        local_repository: Any,
    ) -> ServiceResult:
        if not self._record:
            return ServiceResult(
                ok=True,
                op="reconcile",
                data={
                    "uninstalled": [],
                    "rewritten": [],
                    "manifest_written": False,
                    "lock_updated": False,
                },
                meta={"skipped": "no deprecated packages recorded"},
            )

        logger.debug("Reconciling deprecated packages: %s", ", ".join(self._record.names()))
        packages = self._record.drain()
        definition = self._manifest.read()
        definition_changed = False
        rewritten: list[dict[str, Any]] = []
        uninstalled: list[str] = []
        warnings: list[str] = []

        for package in packages:
            name = package.name
            replacement = transform_package_name(name)

            if is_root_requirement(definition, name):
                logger.info(
                    "Package %s is a root requirement. nsbridge changes your %s"
                    " to require %s directly!",
                    name,
                    self._manifest.path.name,
                    replacement,
                    extra={"package": name, "replacement": replacement},
                )
                sections = update_root_requirements(definition, name, replacement)
                definition_changed = True
                rewritten.append({"name": name, "replacement": replacement, "sections": sections})

            try:
                installation_manager.uninstall(local_repository, UninstallOperation(package))
            except Exception as exc:
                logger.warning("Could not uninstall %s", name, exc_info=True)
                warnings.append(f"Could not uninstall {name}: {exc}")
                continue
            uninstalled.append(str(PackageReference.of(package)))

        if definition_changed:
            self._manifest.write(definition)

        lock_updated = False
        if self._lock_updater is not None:
            self._lock_updater.update()
            lock_updated = True
        else:
            logger.debug("Lock file update disabled; skipping")

        return ServiceResult(
            ok=True,
            op="reconcile",
            data={
                "uninstalled": uninstalled,
                "rewritten": rewritten,
                "manifest_written": definition_changed,
                "lock_updated": lock_updated,
            },
            warnings=warnings,
        )
