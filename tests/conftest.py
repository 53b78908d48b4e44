"""Shared fixtures: an in-memory host shell and a deployable configuration."""

from __future__ import annotations

import zipfile
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest
from host_provisioner.host_shell import CommandFailedError, CommandResult, HostShell


@dataclass(frozen=True)
class RecordedCall:
    command: tuple[str, ...]
    cwd: Path | None
    env: Mapping[str, str] | None
    input_text: str | None
    stdout_path: Path | None
    privileged: bool


@dataclass(frozen=True)
class _Response:
    returncode: int
    stdout: str
    stderr: str


class FakeHostShell(HostShell):
    """Records commands instead of running them; responses match by prefix."""

    def __init__(self, binaries: Sequence[str] = ()) -> None:
        super().__init__(use_sudo=False)
        self.binaries = set(binaries)
        self.calls: list[RecordedCall] = []
        self._responses: list[tuple[tuple[str, ...], _Response]] = []
        self.hooks: list[tuple[tuple[str, ...], Callable[[RecordedCall], None]]] = []
        self.on("mkdir", hook=_create_directory)

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.binaries else None

    def respond(
        self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = ""
    ) -> None:
        self._responses.append((prefix, _Response(returncode, stdout, stderr)))

    def on(self, *prefix: str, hook: Callable[[RecordedCall], None]) -> None:
        self.hooks.append((prefix, hook))

    def run(
        self,
        command,
        *,
        cwd=None,
        env=None,
        input_text=None,
        stdout_path=None,
        privileged=False,
        check=True,
    ) -> CommandResult:
        call = RecordedCall(
            command=tuple(command),
            cwd=cwd,
            env=env,
            input_text=input_text,
            stdout_path=stdout_path,
            privileged=privileged,
        )
        self.calls.append(call)
        for prefix, hook in self.hooks:
            if call.command[: len(prefix)] == prefix:
                hook(call)
        response = _Response(0, "", "")
        for prefix, candidate in reversed(self._responses):
            if call.command[: len(prefix)] == prefix:
                response = candidate
                break
        if stdout_path is not None:
            stdout_path.write_text(response.stdout, encoding="utf-8")
        if check and response.returncode != 0:
            raise CommandFailedError(call.command, response.returncode, response.stderr)
        return CommandResult(
            command=call.command,
            returncode=response.returncode,
            stdout="" if stdout_path is not None else response.stdout,
            stderr=response.stderr,
        )

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [call.command for call in self.calls]

    def calls_starting_with(self, *prefix: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.command[: len(prefix)] == prefix]


def _create_directory(call: RecordedCall) -> None:
    Path(call.command[-1]).mkdir(parents=True, exist_ok=True)


PROVISIONED_BINARIES = ("apt-get", "curl", "mysql", "mysqldump", "node", "npm", "pm2")


@pytest.fixture
def fake_shell() -> FakeHostShell:
    """A fully provisioned apt host whose database is empty."""
    shell = FakeHostShell(PROVISIONED_BINARIES)
    shell.respond("mysql", "-h", stdout="0\n")
    return shell


def write_archive(path: Path, files: Mapping[str, str]) -> Path:
    with zipfile.ZipFile(path, "w") as bundle:
        for name, contents in files.items():
            bundle.writestr(name, contents)
    return path


def write_properties(path: Path, settings: Mapping[str, str]) -> Path:
    lines = ["# provisioning settings"] + [f"{key}={value}" for key, value in settings.items()]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def base_settings(tmp_path: Path) -> dict[str, str]:
    return {
        "NODE_ENV": "production",
        "APP_BASE_DIR": str(tmp_path / "app"),
        "BACKEND_ZIP": "backend.zip",
        "FRONTEND_ZIP": "frontend.zip",
        "BACKEND_PORT": "3001",
        "FRONTEND_PORT": "3000",
        "DB_NAME": "casino",
        "DB_USER": "casino_app",
        "DB_PASSWORD": "s3cret",
        "SYSTEM_USER": "deploy",
        "NODE_VERSION": "20",
        "BACKEND_JWT_SECRET": "jwt-secret",
        "NEXT_PUBLIC_API_URL": "http://localhost:3001",
    }


@pytest.fixture
def deployable_config(tmp_path: Path, base_settings: dict[str, str]) -> Path:
    """A configuration source with both archives beside it."""
    write_archive(
        tmp_path / "backend.zip",
        {"package.json": '{"name": "backend"}', "prisma/schema.prisma": "model User {}"},
    )
    write_archive(tmp_path / "frontend.zip", {"package.json": '{"name": "frontend"}'})
    return write_properties(tmp_path / "configuration.properties", base_settings)


@pytest.fixture
def make_shell() -> Callable[..., FakeHostShell]:
    return FakeHostShell


@pytest.fixture
def properties_writer() -> Callable[[Path, Mapping[str, str]], Path]:
    return write_properties


@pytest.fixture
def archive_writer() -> Callable[[Path, Mapping[str, str]], Path]:
    return write_archive
