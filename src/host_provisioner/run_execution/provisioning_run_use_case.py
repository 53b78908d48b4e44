"""Provisioning run use-case service."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from host_provisioner.artifact_deployment import (
    DeploymentTarget,
    deploy_artifacts,
    install_artifact_dependencies,
)
from host_provisioner.configuration import load_configuration
from host_provisioner.database_setup import MigrationState, provision_database, reconcile_schema
from host_provisioner.database_setup.migration_safety import Clock
from host_provisioner.errors import ProvisioningError
from host_provisioner.host_shell import CommandFailedError, HostShell
from host_provisioner.installation import install_prerequisites
from host_provisioner.platform_detection import detect_capabilities
from host_provisioner.process_supervision import configure_supervisor
from host_provisioner.process_supervision.boot_persistence import InitProbe
from host_provisioner.step_outcomes import StepOutcome

from .failure_reporting import build_failure_report
from .run_contracts import RunOutcome, RunRequest

logger = logging.getLogger(__name__)


def execute_provisioning_run(
    request: RunRequest,
    *,
    shell: HostShell | None = None,
    environ: Mapping[str, str] | None = None,
    platform_name: str | None = None,
    systemd_probe: InitProbe | None = None,
    clock: Clock | None = None,
) -> RunOutcome:
    """Run every provisioning step in order, stopping at the first fatal failure.

    Fatal failures never escape: the first one is turned into the outcome's
    failure report and exit status. Tolerated failures appear as degraded
    step outcomes.
    """
    steps: list[StepOutcome] = []
    target: DeploymentTarget | None = None
    migration: MigrationState | None = None
    try:
        configuration = load_configuration(
            request.config_path, environ=environ, cwd=request.working_directory
        )
        host_shell = shell or HostShell()

        descriptor = detect_capabilities(host_shell, platform_name=platform_name)
        _record(steps, install_prerequisites(descriptor, configuration, host_shell))

        target = deploy_artifacts(configuration, host_shell)
        _record(steps, StepOutcome.ok("deploy artifacts", str(target.base_dir)))
        _record(steps, install_artifact_dependencies(target, host_shell))

        _record(steps, provision_database(configuration.database, host_shell))
        migration = reconcile_schema(configuration, target, host_shell, clock=clock)
        _record(steps, _migration_outcome(migration))

        _record(
            steps,
            configure_supervisor(
                configuration,
                target,
                host_shell,
                platform_name=platform_name,
                systemd_probe=systemd_probe,
            ),
        )
    except (ProvisioningError, CommandFailedError) as exc:
        logger.debug("provisioning aborted", exc_info=exc)
        report = build_failure_report(exc)
        return RunOutcome(
            exit_status=report.exit_status,
            steps=tuple(steps),
            failure=report,
            target=target,
            migration=migration,
        )

    return RunOutcome(exit_status=0, steps=tuple(steps), target=target, migration=migration)


def _record(steps: list[StepOutcome], outcome: StepOutcome) -> None:
    for warning in outcome.warnings:
        logger.warning("%s: %s", outcome.step, warning)
    steps.append(outcome)


def _migration_outcome(migration: MigrationState) -> StepOutcome:
    messages = []
    if migration.backup_path is not None:
        messages.append(f"backup written to {migration.backup_path}")
    if migration.schema_pushed:
        messages.append("schema pushed")
    if migration.warnings:
        return StepOutcome.degraded(
            "reconcile schema", *migration.warnings, messages=tuple(messages)
        )
    return StepOutcome.ok("reconcile schema", *messages)
