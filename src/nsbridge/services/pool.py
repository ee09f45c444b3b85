"""Candidate pool interception.

Runs once per resolution pass, before the host freezes its candidate pool.
Deprecated candidates that are already installed are swapped for their
replacement at the same version, and the originals are marked
unacceptable so the resolver cannot pick them again.

INVARIANT: Fail open. A candidate without a concrete replacement at its
exact version stays in the pool untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from nsbridge.domain.names import is_deprecated_package, transform_package_name
from nsbridge.services.result import ServiceResult

if TYPE_CHECKING:
    from nsbridge.host import CandidatePool, RepositoryManager

logger = logging.getLogger(__name__)


class InstalledPackages(Protocol):
    def get_package_names(self) -> list[str]: ...


class PoolInterceptor:
    """Swap installed deprecated candidates for their replacements."""

    def __init__(
        self,
        repository_manager: RepositoryManager,
        installed_repository: InstalledPackages,
    ) -> None:
        self._repositories = repository_manager
        self._installed = installed_repository

    def intercept(self, pool: CandidatePool) -> ServiceResult:
        installed_deprecated = {
            name for name in self._installed.get_package_names() if is_deprecated_package(name)
        }
        if not installed_deprecated:
            return ServiceResult(
                ok=True,
                op="intercept_pool",
                data={"substitutions": []},
                meta={"skipped": "no deprecated packages installed"},
            )

        unacceptable = pool.get_unacceptable_fixed_packages()
        packages = pool.get_packages()
        substitutions: list[dict[str, str]] = []

        for index, package in enumerate(packages):
            name = package.name
            if name not in installed_deprecated:
                continue

            replacement = transform_package_name(name)
            if replacement == name:
                continue

            replacement_package = self._repositories.find_package(replacement, package.version)
            if replacement_package is None:
                logger.debug(
                    "No replacement package %s at version %s for %s",
                    replacement,
                    package.version,
                    name,
                )
                continue

            unacceptable.append(package)
            packages[index] = replacement_package
            logger.info(
                "Slipstreaming %s => %s",
                name,
                replacement,
                extra={"package": name, "replacement": replacement, "version": package.version},
            )
            substitutions.append(
                {"name": name, "replacement": replacement, "version": package.version}
            )

        pool.set_unacceptable_fixed_packages(unacceptable)
        pool.set_packages(packages)

        return ServiceResult(
            ok=True,
            op="intercept_pool",
            data={"substitutions": substitutions},
            meta={"candidates": len(packages)},
        )
