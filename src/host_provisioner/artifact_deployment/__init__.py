"""Artifact deployment exports."""

from .artifact_deployer import ExtractionError, deploy_artifacts, write_environment_file
from .dependency_installer import install_artifact_dependencies
from .deployment_models import ENVIRONMENT_FILENAME, ArtifactTarget, DeploymentTarget

__all__ = [
    "ArtifactTarget",
    "DeploymentTarget",
    "ENVIRONMENT_FILENAME",
    "ExtractionError",
    "deploy_artifacts",
    "install_artifact_dependencies",
    "write_environment_file",
]
