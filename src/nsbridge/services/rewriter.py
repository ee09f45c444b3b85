"""DependencyRewriter — lifecycle callbacks for one host invocation.

The host (through the pluggy adapter in :mod:`nsbridge.plugins`) calls:

- ``on_pre_command_run`` before a command parses its package arguments,
- ``on_pool_create`` once per resolution pass,
- ``on_package_operation`` once per install/update operation,
- ``on_post_install`` once after all operations completed.

One instance owns one :class:`DeprecatedInstallRecord`; a new host
invocation gets a new rewriter and a new record.

INVARIANT: While a nested lock-only update runs, every callback is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from nsbridge.infrastructure.installed import InstalledFilesystemRepository
from nsbridge.infrastructure.manifest import ManifestFile
from nsbridge.services.command import CommandArgumentRewriter
from nsbridge.services.install import InstallInterceptor
from nsbridge.services.lock import LockFileUpdater, lock_update_active
from nsbridge.services.pool import PoolInterceptor
from nsbridge.services.reconcile import PostInstallReconciler
from nsbridge.services.result import ServiceResult
from nsbridge.services.state import DeprecatedInstallRecord

if TYPE_CHECKING:
    from nsbridge.config.settings import BridgeSettings
    from nsbridge.host import ApplicationFactory, CandidatePool, Host, InstallationManager

logger = logging.getLogger(__name__)


class DependencyRewriter:
    """Wire the substitution services to one host invocation.

    Parameters:
        host: Host collaborators for this invocation.
        settings: Resolved settings (manifest path, vendor dir, toggles).
        application_factory: Builds the host CLI for the nested lock
            update. Defaults to ``host.create_application``.
        record: Shared deprecated-install record. A fresh one by default.
    """

    def __init__(
        self,
        host: Host,
        settings: BridgeSettings,
        *,
        application_factory: ApplicationFactory | None = None,
        record: DeprecatedInstallRecord | None = None,
    ) -> None:
        self._host = host
        self._settings = settings
        self._record = record if record is not None else DeprecatedInstallRecord()

        self._pool = PoolInterceptor(
            host.repository_manager,
            InstalledFilesystemRepository.for_vendor_dir(settings.resolved_vendor_dir),
        )
        self._install = InstallInterceptor(host.repository_manager, self._record)

        lock_updater: LockFileUpdater | None = None
        if settings.lock_update.enabled:
            lock_updater = LockFileUpdater(
                application_factory or host.create_application,
                settings.manifest_path.parent,
                command=settings.lock_update.command,
            )
        self._reconciler = PostInstallReconciler(
            ManifestFile(settings.manifest_path),
            self._record,
            lock_updater,
        )
        self._arguments = CommandArgumentRewriter()

    @property
    def record(self) -> DeprecatedInstallRecord:
        return self._record

    # ------------------------------------------------------------------
    # Lifecycle callbacks
    # ------------------------------------------------------------------

    def on_pre_command_run(self, command: str, packages: Sequence[str]) -> list[str]:
        """Return *packages* with deprecated names swapped for replacements."""
        if lock_update_active() or not self._settings.rewrite.command_arguments:
            return list(packages)
        return self._arguments.rewrite(command, packages)

    def on_pool_create(self, pool: CandidatePool) -> ServiceResult:
        skipped = self._skip_reason(self._settings.rewrite.pool_interception, "intercept_pool")
        if skipped is not None:
            return skipped
        logger.debug("In on_pool_create")
        return self._pool.intercept(pool)

    def on_package_operation(self, operation: object) -> ServiceResult:
        skipped = self._skip_reason(self._settings.rewrite.install_tracking, "record_install")
        if skipped is not None:
            return skipped
        logger.debug("In on_package_operation")
        return self._install.intercept(operation)

    def on_post_install(
        self,
        installation_manager: InstallationManager | None = None,
        local_repository: Any = None,
    ) -> ServiceResult:
        skipped = self._skip_reason(True, "reconcile")
        if skipped is not None:
            return skipped
        if installation_manager is None:
            installation_manager = self._host.installation_manager
        if local_repository is None:
            local_repository = self._host.repository_manager.get_local_repository()
        return self._reconciler.reconcile(installation_manager, local_repository)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _skip_reason(enabled: bool, op: str) -> ServiceResult | None:
        if lock_update_active():
            logger.debug("Skipping %s during nested lock update", op)
            return ServiceResult(ok=True, op=op, meta={"skipped": "nested lock update"})
        if not enabled:
            return ServiceResult(ok=True, op=op, meta={"skipped": "disabled"})
        return None
