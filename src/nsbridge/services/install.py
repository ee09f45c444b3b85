"""Install/update operation tracking.

Runs once per package operation, after the pool was built. Catches the
deprecated packages the pool interception could not swap (nothing was
installed yet, or the host had already fixed the choice). Installation
of the original still proceeds; the package is only recorded so the
post-install reconciler can remove it afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nsbridge.domain.names import is_deprecated_package, transform_package_name
from nsbridge.domain.operations import target_package
from nsbridge.services.result import ServiceResult

if TYPE_CHECKING:
    from nsbridge.host import RepositoryManager
    from nsbridge.services.state import DeprecatedInstallRecord

logger = logging.getLogger(__name__)


class InstallInterceptor:
    """Record deprecated packages that have a concrete replacement."""

    def __init__(
        self,
        repository_manager: RepositoryManager,
        record: DeprecatedInstallRecord,
    ) -> None:
        self._repositories = repository_manager
        self._record = record

    def intercept(self, operation: object) -> ServiceResult:
        package = target_package(operation)
        if package is None:
            logger.debug("Exiting; operation of type %s not supported", type(operation).__name__)
            return _skipped("unsupported operation")

        name = package.name
        if not is_deprecated_package(name):
            logger.debug('Exiting; package "%s" does not have a replacement', name)
            return _skipped("not deprecated", name=name)

        replacement = transform_package_name(name)
        if replacement == name:
            logger.debug(
                'Exiting; while package "%s" is deprecated, it does not have a replacement',
                name,
            )
            return _skipped("no replacement name", name=name)

        version = package.version
        if self._repositories.find_package(replacement, version) is None:
            logger.debug(
                'Exiting; no replacement package found for package "%s" with version %s',
                replacement,
                version,
            )
            return _skipped("no replacement package", name=name)

        logger.info(
            "Could replace package %s with package %s, using version %s",
            name,
            replacement,
            version,
            extra={"package": name, "replacement": replacement, "version": version},
        )
        self._record.append(package)
        return ServiceResult(
            ok=True,
            op="record_install",
            data={"recorded": True, "name": name, "replacement": replacement, "version": version},
        )


def _skipped(reason: str, *, name: str | None = None) -> ServiceResult:
    data: dict[str, object] = {"recorded": False}
    if name is not None:
        data["name"] = name
    return ServiceResult(ok=True, op="record_install", data=data, meta={"skipped": reason})
