"""Artifact extraction and environment-file materialization."""

from __future__ import annotations

import logging
import shutil
import zipfile
from collections.abc import Mapping
from pathlib import Path

from host_provisioner.configuration import ArtifactSettings, Configuration
from host_provisioner.errors import ProvisioningError
from host_provisioner.host_shell import CommandFailedError, HostShell

from .deployment_models import ENVIRONMENT_FILENAME, ArtifactTarget, DeploymentTarget

logger = logging.getLogger(__name__)


class ExtractionError(ProvisioningError):
    """Raised when the artifact trees cannot be materialized."""

    default_hint = "Check that both artifact archives exist next to the configuration file."


def deploy_artifacts(configuration: Configuration, shell: HostShell) -> DeploymentTarget:
    """Replace both artifact trees under the base directory and write their env files.

    Raises:
      ExtractionError: If the base directory cannot be prepared, an archive
        cannot be extracted or an environment file cannot be written.
    """
    base_dir = configuration.base_dir
    logger.info("Preparing application directory %s", base_dir)
    _take_ownership(base_dir, configuration.system_user, shell, create=True)

    logger.info("Extracting backend and frontend...")
    backend = _deploy_artifact(base_dir, configuration.backend)
    frontend = _deploy_artifact(base_dir, configuration.frontend)

    logger.info("Creating environment files...")
    for artifact, values in (
        (backend, configuration.backend_environment()),
        (frontend, configuration.frontend_environment()),
    ):
        try:
            write_environment_file(artifact.environment_file, values)
        except OSError as exc:
            raise ExtractionError(
                f"Cannot write {artifact.environment_file}: {exc}",
                operation=f"write {artifact.environment_file}",
            ) from exc

    _take_ownership(base_dir, configuration.system_user, shell, create=False)
    return DeploymentTarget(base_dir=base_dir, backend=backend, frontend=frontend)


def write_environment_file(path: Path, values: Mapping[str, str]) -> Path:
    """Write `KEY=value` lines, replacing any previous file."""
    path.write_text("".join(f"{key}={value}\n" for key, value in values.items()), encoding="utf-8")
    return path


def _deploy_artifact(base_dir: Path, artifact: ArtifactSettings) -> ArtifactTarget:
    destination = base_dir / artifact.name
    _replace_tree(artifact.archive, destination)
    return ArtifactTarget(
        name=artifact.name,
        working_directory=destination,
        port=artifact.port,
        environment_file=destination / ENVIRONMENT_FILENAME,
    )


def _replace_tree(archive: Path, destination: Path) -> None:
    if not archive.is_file():
        raise ExtractionError(
            f"Artifact archive not found: {archive}", operation=f"extract {archive}"
        )
    try:
        if destination.exists():
            shutil.rmtree(destination)
        with zipfile.ZipFile(archive) as bundle:
            bundle.extractall(destination)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ExtractionError(
            f"Failed to extract {archive} into {destination}: {exc}",
            operation=f"extract {archive}",
        ) from exc


def _take_ownership(base_dir: Path, system_user: str, shell: HostShell, *, create: bool) -> None:
    try:
        if create:
            shell.run(("mkdir", "-p", str(base_dir)), privileged=True)
        shell.run(("chown", "-R", system_user, str(base_dir)), privileged=True)
    except CommandFailedError as exc:
        raise ExtractionError(
            f"Cannot prepare application directory {base_dir}: {exc}",
            exit_status=exc.returncode,
            operation=exc.command_text,
        ) from exc
