"""Per-run state shared between the install interceptor and the reconciler."""

from __future__ import annotations

from nsbridge.domain.packages import Package


class DeprecatedInstallRecord:
    """Deprecated packages that were installed despite having a replacement.

    Arrival order is kept and nothing is de-duplicated: the same name may
    appear at several versions within one run. One instance lives for one
    host invocation and is passed to both services that touch it.
    """

    def __init__(self) -> None:
        self._packages: list[Package] = []

    def append(self, package: Package) -> None:
        self._packages.append(package)

    def drain(self) -> list[Package]:
        """Return every recorded package and empty the record."""
        packages, self._packages = self._packages, []
        return packages

    def names(self) -> list[str]:
        return [package.name for package in self._packages]

    def __len__(self) -> int:
        return len(self._packages)

    def __bool__(self) -> bool:
        return bool(self._packages)
