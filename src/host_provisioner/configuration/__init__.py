"""Configuration domain exports."""

from .loader import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    InvalidSettingError,
    MissingRequiredKeyError,
    MissingSourceError,
    load_configuration,
    parse_properties,
)
from .runtime_settings import (
    REQUIRED_KEYS,
    ArtifactSettings,
    Configuration,
    DatabaseSettings,
)

__all__ = [
    "ArtifactSettings",
    "Configuration",
    "DatabaseSettings",
    "REQUIRED_KEYS",
    "ConfigurationError",
    "InvalidSettingError",
    "MissingRequiredKeyError",
    "MissingSourceError",
    "load_configuration",
    "parse_properties",
    "DEFAULT_CONFIG_FILENAME",
]
