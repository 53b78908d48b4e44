"""Artifact dependency installation."""

from __future__ import annotations

import logging

from host_provisioner.host_shell import CommandFailedError, HostShell
from host_provisioner.installation import InstallError
from host_provisioner.step_outcomes import StepOutcome

from .deployment_models import DeploymentTarget

logger = logging.getLogger(__name__)

STEP_NAME = "install artifact dependencies"


def install_artifact_dependencies(target: DeploymentTarget, shell: HostShell) -> StepOutcome:
    """Run `npm install` inside each freshly extracted artifact."""
    for artifact in target.artifacts:
        logger.info("Installing %s dependencies...", artifact.name)
        try:
            shell.run(("npm", "install"), cwd=artifact.working_directory)
        except CommandFailedError as exc:
            raise InstallError(
                f"Dependency installation failed for {artifact.name}: {exc}",
                exit_status=exc.returncode,
                operation=exc.command_text,
            ) from exc
    return StepOutcome.ok(STEP_NAME, *(artifact.name for artifact in target.artifacts))
