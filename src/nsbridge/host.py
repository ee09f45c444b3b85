"""Narrow interfaces onto the host package manager.

nsbridge never resolves, downloads, or installs anything itself. It only
talks to the host through the protocols below, which a host adapter
implements around its own resolver, repositories and installer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from nsbridge.domain.packages import Package

if TYPE_CHECKING:
    import click

    from nsbridge.domain.operations import UninstallOperation

ApplicationFactory = Callable[[], "click.Command"]


class RepositoryManager(Protocol):
    """Lookup across every repository the host knows about."""

    def find_package(self, name: str, version: str) -> Package | None:
        """Return the package *name* at exactly *version*, or None."""
        ...

    def get_local_repository(self) -> Any:
        """Return the host's record of installed packages."""
        ...


class InstallationManager(Protocol):
    def uninstall(self, repository: Any, operation: UninstallOperation) -> None:
        """Remove ``operation.package`` from *repository* and from disk."""
        ...


class CandidatePool(Protocol):
    """The resolver's view of candidate packages before the pool is frozen."""

    def get_packages(self) -> list[Package]: ...

    def set_packages(self, packages: list[Package]) -> None: ...

    def get_unacceptable_fixed_packages(self) -> list[Package]: ...

    def set_unacceptable_fixed_packages(self, packages: list[Package]) -> None: ...


class Host(Protocol):
    """Everything the plugin needs from one host invocation."""

    repository_manager: RepositoryManager
    installation_manager: InstallationManager

    def create_application(self) -> click.Command:
        """Build the host's CLI entry point for an in-process nested run."""
        ...


@dataclass
class PrePoolCreateEvent:
    """Mutable candidate pool payload for the ``pre_pool_create`` hook."""

    packages: list[Package] = field(default_factory=list)
    unacceptable_fixed_packages: list[Package] = field(default_factory=list)

    def get_packages(self) -> list[Package]:
        return list(self.packages)

    def set_packages(self, packages: list[Package]) -> None:
        self.packages = list(packages)

    def get_unacceptable_fixed_packages(self) -> list[Package]:
        return list(self.unacceptable_fixed_packages)

    def set_unacceptable_fixed_packages(self, packages: list[Package]) -> None:
        self.unacceptable_fixed_packages = list(packages)
