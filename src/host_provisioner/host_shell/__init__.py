"""Host command execution exports."""

from .shell_commands import (
    COMMAND_NOT_FOUND_STATUS,
    CommandFailedError,
    CommandNotFoundError,
    CommandResult,
    HostShell,
    MissingWorkingDirectoryError,
)

__all__ = [
    "COMMAND_NOT_FOUND_STATUS",
    "CommandFailedError",
    "CommandNotFoundError",
    "CommandResult",
    "HostShell",
    "MissingWorkingDirectoryError",
]
