"""Pluggy hook specifications for the host package manager lifecycle.

The host calls these synchronously, in order, during one invocation:
``activate`` -> ``pre_command_run`` -> ``pre_pool_create`` (per
resolution pass) -> ``pre_package_install`` / ``pre_package_update`` (per
operation) -> ``post_autoload_dump`` -> ``deactivate``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from nsbridge.domain.operations import InstallOperation, UpdateOperation
    from nsbridge.host import CandidatePool, Host

hookspec = pluggy.HookspecMarker("nsbridge")


class NsbridgeHookSpec:
    """Hook specifications for the nsbridge plugin system."""

    @hookspec
    def activate(self, host: Host) -> None:
        """Called once when the host loads plugins for an invocation."""

    @hookspec
    def deactivate(self, host: Host) -> None:
        """Called when the host unloads plugins."""

    @hookspec
    def uninstall(self, host: Host) -> None:
        """Called when the plugin package itself is removed."""

    @hookspec(firstresult=True)
    def pre_command_run(self, command: str, packages: list[str]) -> list[str] | None:
        """Return a replacement for the command's package arguments, or None."""

    @hookspec
    def pre_pool_create(self, event: CandidatePool) -> None:
        """Called before the resolver freezes its candidate pool."""

    @hookspec
    def pre_package_install(self, operation: InstallOperation) -> None:
        """Called before a package is installed."""

    @hookspec
    def pre_package_update(self, operation: UpdateOperation) -> None:
        """Called before a package is updated."""

    @hookspec
    def post_autoload_dump(self, host: Host) -> None:
        """Called once after all packages are installed and autoloading is dumped."""
