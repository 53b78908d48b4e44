"""Process supervision exports."""

from .boot_persistence import InitSystem, detect_init_system, register_boot_persistence
from .manifest_models import MANIFEST_FILENAME, ProcessDefinition, SupervisorManifest
from .manifest_renderer import build_manifest, render_manifest, write_manifest
from .supervisor_configurator import SupervisorError, configure_supervisor

__all__ = [
    "InitSystem",
    "MANIFEST_FILENAME",
    "ProcessDefinition",
    "SupervisorError",
    "SupervisorManifest",
    "build_manifest",
    "configure_supervisor",
    "detect_init_system",
    "register_boot_persistence",
    "render_manifest",
    "write_manifest",
]
