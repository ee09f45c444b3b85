"""Built-in plugin forwarding host lifecycle hooks to DependencyRewriter.

``activate`` builds a fresh rewriter (and a fresh deprecated-install
record) for the invocation; ``deactivate`` drops it. Hooks fired while no
rewriter is active are no-ops, and so are ``activate``/``deactivate``
fired by the nested lock-only update, which must not replace the
rewriter that is still reconciling.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

from nsbridge.config.logging import configure_logging
from nsbridge.config.settings import BridgeSettings
from nsbridge.services.lock import lock_update_active
from nsbridge.services.rewriter import DependencyRewriter

if TYPE_CHECKING:
    from nsbridge.domain.operations import InstallOperation, UpdateOperation
    from nsbridge.host import ApplicationFactory, CandidatePool, Host

hookimpl = pluggy.HookimplMarker("nsbridge")

logger = logging.getLogger(__name__)


class DependencyRewriterPlugin:
    """Slipstream replacement packages in place of deprecated ones.

    Parameters:
        settings: Pre-resolved settings. Discovered from the working
            directory on ``activate`` when omitted.
        application_factory: Override for the host CLI used by the nested
            lock update.
    """

    def __init__(
        self,
        settings: BridgeSettings | None = None,
        application_factory: ApplicationFactory | None = None,
    ) -> None:
        self._settings = settings
        self._application_factory = application_factory
        self._rewriter: DependencyRewriter | None = None

    @property
    def rewriter(self) -> DependencyRewriter | None:
        return self._rewriter

    # ------------------------------------------------------------------
    # Plugin lifecycle
    # ------------------------------------------------------------------

    @hookimpl
    def activate(self, host: Host) -> None:
        if lock_update_active():
            return
        settings = self._settings or BridgeSettings.discover()
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        self._rewriter = DependencyRewriter(
            host,
            settings,
            application_factory=self._application_factory,
        )
        logger.debug("Activated for manifest %s", settings.manifest_path)

    @hookimpl
    def deactivate(self, host: Host) -> None:
        if lock_update_active():
            return
        self._rewriter = None

    @hookimpl
    def uninstall(self, host: Host) -> None:
        """No-op; nsbridge leaves nothing behind to clean up."""

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    @hookimpl
    def pre_command_run(self, command: str, packages: list[str]) -> list[str] | None:
        if self._rewriter is None:
            return None
        return self._rewriter.on_pre_command_run(command, packages)

    @hookimpl
    def pre_pool_create(self, event: CandidatePool) -> None:
        if self._rewriter is not None:
            self._rewriter.on_pool_create(event)

    @hookimpl
    def pre_package_install(self, operation: InstallOperation) -> None:
        if self._rewriter is not None:
            self._rewriter.on_package_operation(operation)

    @hookimpl
    def pre_package_update(self, operation: UpdateOperation) -> None:
        if self._rewriter is not None:
            self._rewriter.on_package_operation(operation)

    @hookimpl
    def post_autoload_dump(self, host: Host) -> None:
        if self._rewriter is None:
            return
        self._rewriter.on_post_install(
            host.installation_manager,
            host.repository_manager.get_local_repository(),
        )
