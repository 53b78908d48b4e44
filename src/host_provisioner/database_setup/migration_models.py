"""Schema migration entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from host_provisioner.errors import ProvisioningError


class MigrationError(ProvisioningError):
    """Base for schema reconciliation failures; surfaced as warnings."""


class MigrationConnectivityError(MigrationError):
    """Raised when the current table count cannot be observed."""


class MigrationApplyError(MigrationError):
    """Raised when the schema-push tool fails."""


class BackupFailedError(MigrationError):
    """Raised when the backup tool exists but produced no usable dump."""


@dataclass(frozen=True)
class MigrationState:
    """Observed database state and what reconciliation did about it."""

    table_count: int | None
    backup_path: Path | None
    schema_pushed: bool
    warnings: tuple[str, ...] = ()

    @property
    def table_count_known(self) -> bool:
        return self.table_count is not None
