"""Supervisor manifest entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

MANIFEST_FILENAME = "ecosystem.config.js"
DEFAULT_START_SCRIPT = "node_modules/next/dist/bin/next"


@dataclass(frozen=True)
class ProcessDefinition:
    """How the supervisor runs one artifact."""

    name: str
    subdirectory: str
    script: str
    port: int
    port_variable: str
    environment: Mapping[str, str]


@dataclass(frozen=True)
class SupervisorManifest:
    """Every supervised process of one deployment."""

    base_dir: Path
    processes: tuple[ProcessDefinition, ...]

    @property
    def process_names(self) -> tuple[str, ...]:
        return tuple(process.name for process in self.processes)
