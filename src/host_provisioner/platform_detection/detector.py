"""Platform and capability detection."""

from __future__ import annotations

import logging
import sys

from host_provisioner.host_shell import HostShell

from .capability_models import CapabilityDescriptor, PackageManagerKind, UnsupportedPlatformError
from .package_strategies import AptStrategy, BrewStrategy, NoneDetected, PackageManagerStrategy

logger = logging.getLogger(__name__)

# Priority order; the first hit is used exclusively.
PACKAGE_MANAGER_PROBES: tuple[tuple[str, type[PackageManagerStrategy]], ...] = (
    ("apt-get", AptStrategy),
    ("brew", BrewStrategy),
)

RUNTIME_BINARY = "node"
SUPERVISOR_BINARY = "pm2"
DATABASE_CLIENT_BINARY = "mysql"

_MACOS_GUIDANCE = (
    "No supported package manager found. Install Homebrew (https://brew.sh) and re-run, "
    "or install the required dependencies manually: curl, mysql, node, npm, pm2."
)
_GENERIC_GUIDANCE = (
    "No supported package manager found (apt or brew). This provisioner expects "
    "Debian/Ubuntu (apt) or macOS with Homebrew (brew). Please install the required "
    "dependencies manually: curl, mysql, node, npm, pm2."
)


def detect_capabilities(
    shell: HostShell, *, platform_name: str | None = None
) -> CapabilityDescriptor:
    """Select a package-manager strategy and probe prerequisite binaries.

    Raises:
      UnsupportedPlatformError: If prerequisites are missing and no supported
        package manager is available.
    """
    strategy: PackageManagerStrategy = NoneDetected(shell)
    for binary, strategy_cls in PACKAGE_MANAGER_PROBES:
        if shell.which(binary):
            strategy = strategy_cls(shell)
            break

    descriptor = CapabilityDescriptor(
        package_manager=strategy.kind,
        strategy=strategy,
        has_runtime=shell.which(RUNTIME_BINARY) is not None,
        has_supervisor=shell.which(SUPERVISOR_BINARY) is not None,
        has_database_client=shell.which(DATABASE_CLIENT_BINARY) is not None,
    )

    if descriptor.package_manager is PackageManagerKind.NONE:
        if descriptor.missing_prerequisites:
            guidance = _remediation_guidance(platform_name or sys.platform)
            logger.error(guidance)
            raise UnsupportedPlatformError(
                "Missing prerequisites and no supported package manager: "
                + ", ".join(descriptor.missing_prerequisites),
                operation="detect package manager",
                hint=guidance,
            )
        logger.info("No package manager detected; all prerequisites present, nothing to install")
    else:
        logger.info("Detected %s package manager", descriptor.package_manager.value)
    return descriptor


def _remediation_guidance(platform_name: str) -> str:
    if platform_name == "darwin":
        return _MACOS_GUIDANCE
    return _GENERIC_GUIDANCE
