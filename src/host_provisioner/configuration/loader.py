"""Configuration loader service."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from host_provisioner.errors import ProvisioningError

from .runtime_settings import (
    DEFAULT_DB_HOST,
    DEFAULT_DB_PORT,
    DEFAULT_NODE_ENV,
    OPTIONAL_KEYS,
    REQUIRED_KEYS,
    ArtifactSettings,
    Configuration,
    DatabaseSettings,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "configuration.properties"

_CURRENT_DIRECTORY_PLACEHOLDERS = frozenset({".", "./", "$PWD", "${PWD}"})
_UNRESOLVED_REFERENCE = re.compile(r"\$(\{[A-Za-z_][A-Za-z0-9_]*\}|[A-Za-z_][A-Za-z0-9_]*)")
_SQL_IDENTIFIER = re.compile(r"^[A-Za-z0-9_$]+$")
_TRUTHY = frozenset({"true", "1", "yes", "on"})


class ConfigurationError(ProvisioningError):
    """Raised when the configuration source is invalid."""

    default_hint = "Review the configuration source and re-run the provisioning."


class MissingSourceError(ConfigurationError):
    """Raised when the configuration source does not exist."""


class MissingRequiredKeyError(ConfigurationError):
    """Raised when a required setting is absent or empty."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Missing required config: {key}", operation=f"validate {key}")
        self.key = key


class InvalidSettingError(ConfigurationError):
    """Raised when a setting value cannot be used."""


def load_configuration(
    config_path: Path | str,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Configuration:
    """Load and validate the provisioning configuration.

    Args:
      config_path: Flat `KEY=value` configuration source.
      environ: Process environment consulted for known keys the source omits.
      cwd: Invocation directory used for current-directory placeholders.

    Returns:
      The immutable configuration for this provisioning run.

    Raises:
      MissingSourceError: If the source file does not exist.
      MissingRequiredKeyError: If a required key is absent or empty.
      InvalidSettingError: If a port or identifier setting is malformed.
    """
    path = Path(config_path)
    if not path.is_file():
        raise MissingSourceError(
            f"{path.name} not found!",
            operation=f"read {path}",
            hint=f"Create {path} (see configuration.properties.example) or pass --config.",
        )

    settings = _overlay_environment(parse_properties(path.read_text(encoding="utf-8")), environ)
    for key in REQUIRED_KEYS:
        if key == "APP_BASE_DIR":
            continue
        if not settings.get(key, "").strip():
            raise MissingRequiredKeyError(key)

    invocation_dir = (cwd or Path.cwd()).resolve()
    settings["APP_BASE_DIR"] = str(_resolve_base_dir(settings.get("APP_BASE_DIR"), invocation_dir))

    anchor = path.resolve().parent
    database = DatabaseSettings(
        name=_require_identifier(settings, "DB_NAME"),
        user=_require_identifier(settings, "DB_USER"),
        password=settings.get("DB_PASSWORD") or None,
        root_password=settings.get("MYSQL_ROOT_PASSWORD") or None,
        host=settings.get("DB_HOST") or DEFAULT_DB_HOST,
        port=_parse_port(settings.get("DB_PORT") or str(DEFAULT_DB_PORT), "DB_PORT"),
    )
    configuration = Configuration(
        source_path=path.resolve(),
        settings=MappingProxyType(dict(settings)),
        base_dir=Path(settings["APP_BASE_DIR"]),
        backend=ArtifactSettings(
            name="backend",
            archive=_resolve_archive(anchor, settings["BACKEND_ZIP"]),
            port=_parse_port(settings["BACKEND_PORT"], "BACKEND_PORT"),
        ),
        frontend=ArtifactSettings(
            name="frontend",
            archive=_resolve_archive(anchor, settings["FRONTEND_ZIP"]),
            port=_parse_port(settings["FRONTEND_PORT"], "FRONTEND_PORT"),
        ),
        database=database,
        system_user=settings["SYSTEM_USER"].strip(),
        node_version=settings["NODE_VERSION"].strip(),
        node_env=settings.get("NODE_ENV") or DEFAULT_NODE_ENV,
        enable_boot_persistence=settings.get("ENABLE_PM2_STARTUP", "").lower() in _TRUTHY,
    )
    logger.info("Starting setup for environment: %s", configuration.node_env)
    return configuration


def parse_properties(text: str) -> dict[str, str]:
    """Parse flat `KEY=value` lines, keeping their order."""
    settings: dict[str, str] = {}
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, separator, value = line.partition("=")
        key = key.strip()
        if not separator or not key:
            raise ConfigurationError(f"Malformed configuration line {line_number}: {raw_line!r}")
        settings[key] = _unquote(value.strip())
    return settings


def _overlay_environment(
    settings: dict[str, str], environ: Mapping[str, str] | None
) -> dict[str, str]:
    environment = os.environ if environ is None else environ
    for key in REQUIRED_KEYS + OPTIONAL_KEYS:
        if key not in settings and environment.get(key):
            settings[key] = environment[key]
    return settings


def _resolve_base_dir(value: str | None, invocation_dir: Path) -> Path:
    candidate = (value or "").strip()
    if (
        not candidate
        or candidate in _CURRENT_DIRECTORY_PLACEHOLDERS
        or _UNRESOLVED_REFERENCE.search(candidate)
    ):
        return invocation_dir
    return Path(candidate).expanduser()


def _resolve_archive(anchor: Path, raw_path: str) -> Path:
    candidate = Path(raw_path.strip()).expanduser()
    if not candidate.is_absolute():
        return (anchor / candidate).resolve()
    return candidate


def _parse_port(value: str, key: str) -> int:
    try:
        port = int(value.strip())
    except ValueError as exc:
        raise InvalidSettingError(f"{key} must be an integer, got {value!r}.") from exc
    if not 0 < port < 65536:
        raise InvalidSettingError(f"{key} must be between 1 and 65535, got {port}.")
    return port


def _require_identifier(settings: Mapping[str, str], key: str) -> str:
    value = settings[key].strip()
    if not _SQL_IDENTIFIER.match(value):
        raise InvalidSettingError(
            f"{key} may only contain letters, digits, '_' and '$', got {value!r}."
        )
    return value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value
