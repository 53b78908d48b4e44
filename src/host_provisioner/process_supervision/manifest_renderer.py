"""PM2 ecosystem manifest generation."""

from __future__ import annotations

import json
from pathlib import Path

from host_provisioner.artifact_deployment import ArtifactTarget, DeploymentTarget
from host_provisioner.configuration import Configuration

from .manifest_models import DEFAULT_START_SCRIPT, ProcessDefinition, SupervisorManifest

_HEADER = """// Generated by host-provisioner. Regenerated on every provisioning run.
// Paths and ports resolve from the environment when pm2 loads this file,
// so it stays valid if the deployment directory is moved.
const path = require('path');

const baseDir = process.env.APP_BASE_DIR || __dirname;

module.exports = {
  apps: [
"""

_FOOTER = """  ]
};
"""


def build_manifest(configuration: Configuration, target: DeploymentTarget) -> SupervisorManifest:
    """Describe the backend and frontend processes of a deployment."""
    return SupervisorManifest(
        base_dir=target.base_dir,
        processes=tuple(
            _process_definition(configuration, artifact) for artifact in target.artifacts
        ),
    )


def render_manifest(manifest: SupervisorManifest) -> str:
    rendered_processes = ",\n".join(_render_process(process) for process in manifest.processes)
    return f"{_HEADER}{rendered_processes}\n{_FOOTER}"


def write_manifest(manifest: SupervisorManifest, destination: Path) -> Path:
    """Replace the manifest file with a fresh rendering."""
    destination.write_text(render_manifest(manifest), encoding="utf-8")
    return destination


def _process_definition(
    configuration: Configuration, artifact: ArtifactTarget
) -> ProcessDefinition:
    return ProcessDefinition(
        name=artifact.name,
        subdirectory=artifact.working_directory.name,
        script=DEFAULT_START_SCRIPT,
        port=artifact.port,
        port_variable=f"{artifact.name.upper()}_PORT",
        environment={"NODE_ENV": configuration.node_env},
    )


def _render_process(process: ProcessDefinition) -> str:
    port_expression = f"(process.env.{process.port_variable} || {process.port})"
    environment = ", ".join(
        f"{key}: process.env.{key} || {json.dumps(value)}"
        for key, value in process.environment.items()
    )
    return (
        "    {\n"
        f"      name: {json.dumps(process.name)},\n"
        f"      cwd: path.resolve(baseDir, {json.dumps(process.subdirectory)}),\n"
        f"      script: {json.dumps(process.script)},\n"
        f"      args: `start -p ${{{port_expression}}}`,\n"
        f"      env: {{ {environment}, PORT: String{port_expression} }}\n"
        "    }"
    )
