"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

REQUIRED_KEYS: tuple[str, ...] = (
    "APP_BASE_DIR",
    "BACKEND_ZIP",
    "FRONTEND_ZIP",
    "BACKEND_PORT",
    "FRONTEND_PORT",
    "DB_NAME",
    "DB_USER",
    "SYSTEM_USER",
    "NODE_VERSION",
)

OPTIONAL_KEYS: tuple[str, ...] = (
    "MYSQL_ROOT_PASSWORD",
    "DB_PASSWORD",
    "ENABLE_PM2_STARTUP",
    "DB_HOST",
    "DB_PORT",
    "NODE_ENV",
    "BACKEND_DATABASE_URL",
    "BACKEND_JWT_SECRET",
    "NEXT_PUBLIC_API_URL",
)

DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_PORT = 3306
DEFAULT_NODE_ENV = "production"


@dataclass(frozen=True)
class DatabaseSettings:  # pylint: disable=too-many-instance-attributes
    """MySQL connectivity and ownership settings."""

    name: str
    user: str
    password: str | None
    root_password: str | None
    host: str
    port: int

    def connection_url(self) -> str:
        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")
        return f"mysql://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True)
class ArtifactSettings:
    """Archive location and listening port of one deployable artifact."""

    name: str
    archive: Path
    port: int


@dataclass(frozen=True)
class Configuration:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration aggregate, built once per provisioning run."""

    source_path: Path
    settings: Mapping[str, str]
    base_dir: Path
    backend: ArtifactSettings
    frontend: ArtifactSettings
    database: DatabaseSettings
    system_user: str
    node_version: str
    node_env: str
    enable_boot_persistence: bool

    @property
    def anchor(self) -> Path:
        """Directory archives and backups are resolved against."""
        return self.source_path.parent

    def get(self, key: str, default: str | None = None) -> str | None:
        value = self.settings.get(key)
        return value if value else default

    def backend_environment(self) -> dict[str, str]:
        return {
            "NODE_ENV": self.node_env,
            "PORT": str(self.backend.port),
            "DATABASE_URL": self.get("BACKEND_DATABASE_URL") or self.database.connection_url(),
            "JWT_SECRET": self.settings.get("BACKEND_JWT_SECRET", ""),
        }

    def frontend_environment(self) -> dict[str, str]:
        return {
            "NODE_ENV": self.node_env,
            "PORT": str(self.frontend.port),
            "NEXT_PUBLIC_API_URL": self.settings.get("NEXT_PUBLIC_API_URL", ""),
        }
