"""Platform detection entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from host_provisioner.errors import ProvisioningError

if TYPE_CHECKING:
    from .package_strategies import PackageManagerStrategy


class PackageManagerKind(str, Enum):
    """Closed set of supported system package managers."""

    APT = "apt"
    BREW = "brew"
    NONE = "none"


class UnsupportedPlatformError(ProvisioningError):
    """Raised when prerequisites are missing and no package manager exists."""


@dataclass(frozen=True)
class Prerequisite:
    """A binary the host needs and the package that provides it."""

    binary: str
    package: str


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Detected package manager and pre-existing prerequisite binaries."""

    package_manager: PackageManagerKind
    strategy: PackageManagerStrategy
    has_runtime: bool
    has_supervisor: bool
    has_database_client: bool

    @property
    def missing_prerequisites(self) -> tuple[str, ...]:
        missing = []
        if not self.has_runtime:
            missing.append("runtime")
        if not self.has_supervisor:
            missing.append("supervisor")
        if not self.has_database_client:
            missing.append("database_client")
        return tuple(missing)

    @property
    def installation_required(self) -> bool:
        return self.package_manager is not PackageManagerKind.NONE
