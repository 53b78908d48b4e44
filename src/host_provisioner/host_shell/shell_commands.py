"""Subprocess execution for host provisioning commands."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND_STATUS = 127


class CommandFailedError(Exception):
    """Raised when a checked host command exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Command failed with exit code {returncode}: {shlex.join(self.command)}"
        )

    @property
    def command_text(self) -> str:
        return shlex.join(self.command)


class CommandNotFoundError(CommandFailedError):
    """Raised when the executable of a host command does not exist."""

    def __init__(self, command: Sequence[str]) -> None:
        super().__init__(command, COMMAND_NOT_FOUND_STATUS)
        self.args = (f"Command not found: {shlex.join(self.command)}",)


class MissingWorkingDirectoryError(CommandFailedError):
    """Raised when the working directory of a host command does not exist."""

    def __init__(self, command: Sequence[str], cwd: Path) -> None:
        super().__init__(command, 1)
        self.cwd = cwd
        self.args = (f"Working directory {cwd} does not exist: {shlex.join(self.command)}",)


@dataclass(frozen=True)
class CommandResult:
    """Completed host command."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class HostShell:
    """Runs commands on the local host, optionally behind `sudo`."""

    def __init__(self, *, use_sudo: bool | None = None) -> None:
        if use_sudo is None:
            use_sudo = os.geteuid() != 0 and shutil.which("sudo") is not None
        self.use_sudo = use_sudo

    def which(self, name: str) -> str | None:
        """Return the executable path for `name`, or None when absent."""
        return shutil.which(name)

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        stdout_path: Path | None = None,
        privileged: bool = False,
        check: bool = True,
    ) -> CommandResult:
        """Run one command and return its result.

        Args:
          command: Executable and arguments.
          cwd: Working directory for the command.
          env: Variables added on top of the current process environment.
          input_text: Text fed to the command's standard input.
          stdout_path: When set, standard output is streamed into this file.
          privileged: Prefix the command with `sudo -E` when sudo is in use.
          check: Raise CommandFailedError on a non-zero exit status.

        Raises:
          MissingWorkingDirectoryError: If `cwd` is not an existing directory.
          CommandNotFoundError: If the executable does not exist.
          CommandFailedError: If `check` is set and the command fails.
        """
        full_command = self._privileged_prefix(privileged) + tuple(command)
        if cwd is not None and not cwd.is_dir():
            raise MissingWorkingDirectoryError(full_command, cwd)
        logger.debug("running: %s", shlex.join(full_command))
        process_env = {**os.environ, **env} if env else None
        try:
            if stdout_path is not None:
                with stdout_path.open("w", encoding="utf-8") as handle:
                    completed = subprocess.run(
                        list(full_command),
                        cwd=cwd,
                        env=process_env,
                        input=input_text,
                        stdout=handle,
                        stderr=subprocess.PIPE,
                        text=True,
                        check=False,
                    )
                stdout = ""
            else:
                completed = subprocess.run(
                    list(full_command),
                    cwd=cwd,
                    env=process_env,
                    input=input_text,
                    capture_output=True,
                    text=True,
                    check=False,
                )
                stdout = completed.stdout or ""
        except FileNotFoundError as exc:
            raise CommandNotFoundError(full_command) from exc

        result = CommandResult(
            command=full_command,
            returncode=completed.returncode,
            stdout=stdout,
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            raise CommandFailedError(full_command, result.returncode, result.stderr)
        return result

    def _privileged_prefix(self, privileged: bool) -> tuple[str, ...]:
        if privileged and self.use_sudo:
            return ("sudo", "-E")
        return ()
