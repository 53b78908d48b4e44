"""Database and application-user creation."""

from __future__ import annotations

import logging

from host_provisioner.configuration import DatabaseSettings
from host_provisioner.errors import ProvisioningError
from host_provisioner.host_shell import CommandFailedError, HostShell
from host_provisioner.step_outcomes import StepOutcome

from .mysql_client import admin_invocation

logger = logging.getLogger(__name__)

STEP_NAME = "provision database"


class DatabaseSetupError(ProvisioningError):
    """Raised when the database or its user cannot be created."""

    default_hint = (
        "Check that MySQL is running and that MYSQL_ROOT_PASSWORD matches the root account "
        "(leave it empty for socket authentication)."
    )


def build_provisioning_sql(database: DatabaseSettings) -> str:
    """Render the idempotent database/user/grant statements."""
    password_clause = ""
    if database.password:
        password_clause = f" IDENTIFIED BY '{_quote_literal(database.password)}'"
    account = f"'{database.user}'@'localhost'"
    return (
        f"CREATE DATABASE IF NOT EXISTS `{database.name}`;\n"
        f"CREATE USER IF NOT EXISTS {account}{password_clause};\n"
        f"GRANT ALL PRIVILEGES ON `{database.name}`.* TO {account};\n"
        "FLUSH PRIVILEGES;\n"
    )


def provision_database(database: DatabaseSettings, shell: HostShell) -> StepOutcome:
    """Create the database and grant the application user access to it.

    Raises:
      DatabaseSetupError: If the admin client fails.
    """
    if database.root_password:
        logger.info("Using MySQL root password authentication")
    else:
        logger.info("Using MySQL socket authentication (no root password)")
    if database.password:
        logger.info("Creating database user with password")
    else:
        logger.info("Creating database user without a password")

    try:
        admin_invocation(database).run(shell, input_text=build_provisioning_sql(database))
    except CommandFailedError as exc:
        raise DatabaseSetupError(
            f"Failed to provision database {database.name}: {exc.stderr.strip() or exc}",
            exit_status=exc.returncode,
            operation=exc.command_text,
        ) from exc
    return StepOutcome.ok(STEP_NAME, f"database {database.name} ready for {database.user}")


def _quote_literal(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "''")
