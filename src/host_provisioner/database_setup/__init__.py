"""Database setup exports."""

from .database_provisioner import DatabaseSetupError, build_provisioning_sql, provision_database
from .migration_models import (
    BackupFailedError,
    MigrationApplyError,
    MigrationConnectivityError,
    MigrationError,
    MigrationState,
)
from .migration_safety import backup_schema, count_tables, push_schema, reconcile_schema

__all__ = [
    "BackupFailedError",
    "DatabaseSetupError",
    "MigrationApplyError",
    "MigrationConnectivityError",
    "MigrationError",
    "MigrationState",
    "backup_schema",
    "build_provisioning_sql",
    "count_tables",
    "provision_database",
    "push_schema",
    "reconcile_schema",
]
