"""Installation domain exports."""

from .prerequisite_installer import InstallError, install_prerequisites

__all__ = ["InstallError", "install_prerequisites"]
