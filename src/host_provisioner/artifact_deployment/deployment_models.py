"""Artifact deployment entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

ENVIRONMENT_FILENAME = ".env.production"


@dataclass(frozen=True)
class ArtifactTarget:
    """One extracted artifact ready to be supervised."""

    name: str
    working_directory: Path
    port: int
    environment_file: Path


@dataclass(frozen=True)
class DeploymentTarget:
    """The deployed backend/frontend pair."""

    base_dir: Path
    backend: ArtifactTarget
    frontend: ArtifactTarget

    @property
    def artifacts(self) -> tuple[ArtifactTarget, ArtifactTarget]:
        return (self.backend, self.frontend)
