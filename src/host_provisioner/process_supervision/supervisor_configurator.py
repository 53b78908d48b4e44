"""Process supervisor lifecycle for the deployed artifacts."""

from __future__ import annotations

import logging

from host_provisioner.artifact_deployment import DeploymentTarget
from host_provisioner.configuration import Configuration
from host_provisioner.errors import ProvisioningError
from host_provisioner.host_shell import CommandFailedError, HostShell
from host_provisioner.step_outcomes import StepOutcome

from .boot_persistence import InitProbe, register_boot_persistence
from .manifest_models import MANIFEST_FILENAME
from .manifest_renderer import build_manifest, write_manifest

logger = logging.getLogger(__name__)

STEP_NAME = "configure supervisor"


class SupervisorError(ProvisioningError):
    """Raised when pm2 cannot start or persist the deployed processes."""

    default_hint = "Inspect `pm2 logs` and the generated ecosystem.config.js, then re-run."


def configure_supervisor(
    configuration: Configuration,
    target: DeploymentTarget,
    shell: HostShell,
    *,
    platform_name: str | None = None,
    systemd_probe: InitProbe | None = None,
) -> StepOutcome:
    """Regenerate the manifest, restart both processes and save the process list.

    Raises:
      SupervisorError: If the manifest cannot be written or pm2 fails to start
        or save the processes.
    """
    manifest = build_manifest(configuration, target)
    manifest_path = target.base_dir / MANIFEST_FILENAME
    try:
        write_manifest(manifest, manifest_path)
    except OSError as exc:
        raise SupervisorError(
            f"Cannot write supervisor manifest {manifest_path}: {exc}",
            operation=f"write {manifest_path}",
        ) from exc
    logger.info("Wrote supervisor manifest %s", manifest_path)

    try:
        # Absent processes make `pm2 delete` fail; that is fine on first deploy.
        shell.run(("pm2", "delete", *manifest.process_names), check=False)
        logger.info("Starting applications...")
        shell.run(("pm2", "start", str(manifest_path)), cwd=target.base_dir)
        shell.run(("pm2", "save"))
    except CommandFailedError as exc:
        raise SupervisorError(
            str(exc), exit_status=exc.returncode, operation=exc.command_text
        ) from exc

    messages = [f"{name} started" for name in manifest.process_names]
    if not configuration.enable_boot_persistence:
        return StepOutcome.ok(STEP_NAME, *messages)

    persistence = register_boot_persistence(
        configuration.system_user,
        shell,
        platform_name=platform_name,
        systemd_probe=systemd_probe,
    )
    if persistence.is_degraded:
        return StepOutcome.degraded(
            STEP_NAME, *persistence.warnings, messages=(*messages, *persistence.messages)
        )
    return StepOutcome.ok(STEP_NAME, *messages, *persistence.messages)
