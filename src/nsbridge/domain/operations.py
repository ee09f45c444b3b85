"""Install-phase operations the host performs on individual packages.

Only install and update operations carry a package that may need
substitution. Everything else is passed through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from nsbridge.domain.packages import Package


class OperationKind(StrEnum):
    INSTALL = "install"
    UPDATE = "update"
    UNINSTALL = "uninstall"
    MARK_ALIAS_INSTALLED = "mark-alias-installed"


@dataclass(frozen=True)
class InstallOperation:
    package: Package
    kind: OperationKind = OperationKind.INSTALL


@dataclass(frozen=True)
class UpdateOperation:
    initial_package: Package
    target_package: Package
    kind: OperationKind = OperationKind.UPDATE


@dataclass(frozen=True)
class UninstallOperation:
    package: Package
    kind: OperationKind = OperationKind.UNINSTALL


@dataclass(frozen=True)
class MarkAliasInstalledOperation:
    package: Package
    kind: OperationKind = OperationKind.MARK_ALIAS_INSTALLED


Operation = InstallOperation | UpdateOperation | UninstallOperation | MarkAliasInstalledOperation


def target_package(operation: object) -> Package | None:
    """Return the package an install or update operation will put on disk.

    None for every other operation kind.
    """
    if isinstance(operation, InstallOperation):
        return operation.package
    if isinstance(operation, UpdateOperation):
        return operation.target_package
    return None
