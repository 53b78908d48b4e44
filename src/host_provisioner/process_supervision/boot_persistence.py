"""PM2 boot-start registration per init system."""

from __future__ import annotations

import logging
import pwd
import sys
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from host_provisioner.host_shell import CommandFailedError, HostShell
from host_provisioner.step_outcomes import StepOutcome

logger = logging.getLogger(__name__)

STEP_NAME = "register boot persistence"
SYSTEMD_RUNTIME_DIR = Path("/run/systemd/system")

InitProbe = Callable[[], bool]


class InitSystem(str, Enum):
    """Init systems pm2 can register itself with."""

    SYSTEMD = "systemd"
    LAUNCHD = "launchd"


def detect_init_system(
    *, platform_name: str | None = None, systemd_probe: InitProbe | None = None
) -> InitSystem | None:
    platform_name = platform_name or sys.platform
    if platform_name == "darwin":
        return InitSystem.LAUNCHD
    probe = systemd_probe or SYSTEMD_RUNTIME_DIR.is_dir
    if platform_name.startswith("linux") and probe():
        return InitSystem.SYSTEMD
    return None


def register_boot_persistence(
    system_user: str,
    shell: HostShell,
    *,
    platform_name: str | None = None,
    systemd_probe: InitProbe | None = None,
) -> StepOutcome:
    """Ask pm2 to restore the saved process list at boot.

    Never raises; an unsupported init system or a failing registration is
    reported as a degraded outcome.
    """
    init_system = detect_init_system(platform_name=platform_name, systemd_probe=systemd_probe)
    if init_system is None:
        message = "unsupported init system, boot persistence skipped"
        logger.warning(message)
        return StepOutcome.degraded(STEP_NAME, message)

    command = (
        "env",
        f"PATH={_tool_path(shell)}",
        "pm2",
        "startup",
        init_system.value,
        "-u",
        system_user,
        "--hp",
        _home_directory(system_user, init_system),
    )
    try:
        shell.run(command, privileged=True)
    except CommandFailedError as exc:
        message = f"boot persistence registration failed: {exc}"
        logger.warning(message)
        return StepOutcome.degraded(STEP_NAME, message)
    logger.info("Registered pm2 with %s for %s", init_system.value, system_user)
    return StepOutcome.ok(STEP_NAME, f"pm2 registered with {init_system.value}")


def _tool_path(shell: HostShell) -> str:
    # sudo resets PATH; pm2 startup needs node and pm2 reachable.
    directories: list[str] = []
    for binary in ("node", "pm2"):
        location = shell.which(binary)
        if location:
            directory = str(Path(location).parent)
            if directory not in directories:
                directories.append(directory)
    for default in ("/usr/local/bin", "/usr/bin", "/bin"):
        if default not in directories:
            directories.append(default)
    return ":".join(directories)


def _home_directory(system_user: str, init_system: InitSystem) -> str:
    try:
        return pwd.getpwnam(system_user).pw_dir
    except KeyError:
        if init_system is InitSystem.LAUNCHD:
            return f"/Users/{system_user}"
        return f"/home/{system_user}"
