"""Package references as observed from the host resolver."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Package(Protocol):
    """Anything the host hands us that names a package at a version."""

    @property
    def name(self) -> str: ...

    @property
    def version(self) -> str: ...


class PackageReference(BaseModel):
    """Immutable ``{name, version}`` pair. Identity is the name."""

    model_config = {"frozen": True}

    name: str
    version: str

    @classmethod
    def of(cls, package: Package) -> PackageReference:
        """Snapshot any host package object."""
        if isinstance(package, cls):
            return package
        return cls(name=package.name, version=package.version)

    def __str__(self) -> str:
        return f"{self.name} ({self.version})"
