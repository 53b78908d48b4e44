"""Idempotent installation of host prerequisites."""

from __future__ import annotations

import logging

from host_provisioner.configuration import Configuration
from host_provisioner.errors import ProvisioningError
from host_provisioner.host_shell import CommandFailedError, HostShell
from host_provisioner.platform_detection import (
    CapabilityDescriptor,
    PackageManagerStrategy,
    Prerequisite,
)
from host_provisioner.step_outcomes import StepOutcome

logger = logging.getLogger(__name__)

STEP_NAME = "install prerequisites"
SUPERVISOR_INSTALL_COMMAND = ("npm", "install", "-g", "pm2")


class InstallError(ProvisioningError):
    """Raised when a prerequisite cannot be installed."""

    default_hint = "Check package manager connectivity and sudo rights, then re-run."


def install_prerequisites(
    descriptor: CapabilityDescriptor, configuration: Configuration, shell: HostShell
) -> StepOutcome:
    """Install only the prerequisites the host is missing.

    Raises:
      InstallError: If any installation command fails.
    """
    if not descriptor.installation_required:
        return StepOutcome.ok(STEP_NAME, "no installation required")

    strategy = descriptor.strategy
    installed: list[str] = []
    try:
        missing_packages = [
            prerequisite.package
            for prerequisite in strategy.bootstrap_prerequisites
            if not _is_present(shell, strategy, prerequisite)
        ]
        if missing_packages:
            logger.info("Installing system dependencies: %s", ", ".join(missing_packages))
            strategy.update_index()
            strategy.install(missing_packages)
            installed.extend(missing_packages)
        strategy.after_bootstrap()

        if not descriptor.has_runtime:
            _install_runtime(strategy, configuration.node_version)
            installed.append(f"node {configuration.node_version}")

        if not descriptor.has_supervisor:
            logger.info("Installing PM2...")
            shell.run(SUPERVISOR_INSTALL_COMMAND, privileged=True)
            installed.append("pm2")
    except CommandFailedError as exc:
        raise InstallError(
            str(exc), exit_status=exc.returncode, operation=exc.command_text
        ) from exc

    if not installed:
        return StepOutcome.ok(STEP_NAME, "all prerequisites already present")
    return StepOutcome.ok(STEP_NAME, *(f"installed {item}" for item in installed))


def _is_present(
    shell: HostShell, strategy: PackageManagerStrategy, prerequisite: Prerequisite
) -> bool:
    if shell.which(prerequisite.binary) is not None:
        return True
    return strategy.is_installed(prerequisite.package)


def _install_runtime(strategy: PackageManagerStrategy, version: str) -> None:
    logger.info("Installing Node.js %s...", version)
    try:
        strategy.install_runtime(version)
    except CommandFailedError as exc:
        fallback = strategy.unpinned_runtime_package
        if fallback is None:
            raise
        logger.warning(
            "Pinned Node.js %s unavailable via %s (%s); installing unpinned runtime",
            version,
            strategy.kind.value,
            exc,
        )
        strategy.install((fallback,))
