"""Backup-before-mutate schema reconciliation.

An empty schema is pushed directly. A populated schema implies an earlier
deployment, so it is dumped to a timestamped file next to the configuration
source before the schema-push tool is allowed to touch it.
`reconcile_schema` downgrades every failure to a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from host_provisioner.artifact_deployment import DeploymentTarget
from host_provisioner.configuration import Configuration, DatabaseSettings
from host_provisioner.host_shell import CommandFailedError, HostShell

from .migration_models import (
    BackupFailedError,
    MigrationApplyError,
    MigrationConnectivityError,
    MigrationState,
)
from .mysql_client import application_invocation

logger = logging.getLogger(__name__)

BACKUP_TOOL = "mysqldump"
SCHEMA_GENERATE_COMMAND = ("npx", "prisma", "generate")
SCHEMA_PUSH_COMMAND = ("npx", "prisma", "db", "push")

Clock = Callable[[], datetime]


def reconcile_schema(
    configuration: Configuration,
    target: DeploymentTarget,
    shell: HostShell,
    *,
    clock: Clock | None = None,
) -> MigrationState:
    """Protect existing data, then push the backend schema to the database."""
    database = configuration.database
    warnings: list[str] = []

    try:
        table_count: int | None = count_tables(database, shell)
        logger.info("Schema %s holds %d table(s)", database.name, table_count)
    except MigrationConnectivityError as exc:
        table_count = None
        warnings.append(f"{exc}; attempting schema push anyway")
        logger.warning(warnings[-1])

    backup_path: Path | None = None
    if table_count:
        if shell.which(BACKUP_TOOL) is None:
            warnings.append(
                f"{BACKUP_TOOL} not found: {table_count} existing table(s) in {database.name} "
                "will be modified WITHOUT a backup"
            )
            logger.warning(warnings[-1])
        else:
            timestamp = (clock or _utc_now)().strftime("%Y%m%d-%H%M%S")
            destination = configuration.anchor / f"{database.name}-backup-{timestamp}.sql"
            try:
                backup_path = backup_schema(database, destination, shell)
            except BackupFailedError as exc:
                warnings.append(f"{exc}; schema push skipped to protect existing data")
                logger.warning(warnings[-1])
                return MigrationState(
                    table_count=table_count,
                    backup_path=None,
                    schema_pushed=False,
                    warnings=tuple(warnings),
                )
            logger.info("Backed up %s to %s", database.name, backup_path)

    try:
        push_schema(configuration, target, shell)
        schema_pushed = True
    except MigrationApplyError as exc:
        schema_pushed = False
        warnings.append(str(exc))
        logger.warning("Schema push failed (exit %s): %s", exc.exit_status, exc)

    return MigrationState(
        table_count=table_count,
        backup_path=backup_path,
        schema_pushed=schema_pushed,
        warnings=tuple(warnings),
    )


def count_tables(database: DatabaseSettings, shell: HostShell) -> int:
    """Return the number of tables in the target schema.

    Raises:
      MigrationConnectivityError: If the query cannot run or returns garbage.
    """
    query = (
        "SELECT COUNT(*) FROM information_schema.tables "
        f"WHERE table_schema = '{database.name}';"
    )
    try:
        result = application_invocation(database).run(shell, "-N", "-B", "-e", query)
    except CommandFailedError as exc:
        raise MigrationConnectivityError(
            f"Could not inspect database {database.name}: {exc.stderr.strip() or exc}",
            exit_status=exc.returncode,
            operation=exc.command_text,
        ) from exc
    output = result.stdout.strip()
    try:
        return int(output.splitlines()[-1])
    except (IndexError, ValueError) as exc:
        raise MigrationConnectivityError(
            f"Unexpected table count output for {database.name}: {output!r}"
        ) from exc


def backup_schema(database: DatabaseSettings, destination: Path, shell: HostShell) -> Path:
    """Dump the full schema into `destination`.

    Raises:
      BackupFailedError: If the dump fails, is empty or cannot be written; no
        partial file is kept.
    """
    invocation = application_invocation(database, program=BACKUP_TOOL)
    try:
        invocation.run(
            shell,
            "--single-transaction",
            "--no-tablespaces",
            "--routines",
            "--triggers",
            database.name,
            stdout_path=destination,
        )
    except CommandFailedError as exc:
        destination.unlink(missing_ok=True)
        raise BackupFailedError(
            f"Backup of {database.name} failed: {exc.stderr.strip() or exc}",
            exit_status=exc.returncode,
            operation=exc.command_text,
        ) from exc
    except OSError as exc:
        raise BackupFailedError(
            f"Cannot write backup of {database.name} to {destination}: {exc}",
            operation=f"write {destination}",
        ) from exc
    if not destination.exists() or destination.stat().st_size == 0:
        destination.unlink(missing_ok=True)
        raise BackupFailedError(f"Backup of {database.name} produced an empty dump")
    return destination


def push_schema(configuration: Configuration, target: DeploymentTarget, shell: HostShell) -> None:
    """Generate the client bindings and push the schema from the backend tree.

    Raises:
      MigrationApplyError: If either schema-push command fails.
    """
    env = {"DATABASE_URL": configuration.backend_environment()["DATABASE_URL"]}
    for command in (SCHEMA_GENERATE_COMMAND, SCHEMA_PUSH_COMMAND):
        try:
            shell.run(command, cwd=target.backend.working_directory, env=env)
        except CommandFailedError as exc:
            raise MigrationApplyError(
                f"Schema push step failed with exit code {exc.returncode}: {exc.command_text}",
                exit_status=exc.returncode,
                operation=exc.command_text,
            ) from exc


def _utc_now() -> datetime:
    return datetime.now(UTC)
