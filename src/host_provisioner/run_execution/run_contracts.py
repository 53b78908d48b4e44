"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from host_provisioner.artifact_deployment import DeploymentTarget
from host_provisioner.database_setup import MigrationState
from host_provisioner.step_outcomes import StepOutcome

from .failure_reporting import FailureReport


@dataclass(frozen=True)
class RunRequest:
    """Input contract for one provisioning run."""

    config_path: str
    working_directory: Path | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one provisioning run, successful or not."""

    exit_status: int
    steps: tuple[StepOutcome, ...]
    failure: FailureReport | None = None
    target: DeploymentTarget | None = None
    migration: MigrationState | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(warning for step in self.steps for warning in step.warnings)
