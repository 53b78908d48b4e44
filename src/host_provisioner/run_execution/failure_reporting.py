"""Single diagnostic format for the first fatal failure of a run."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from pathlib import Path

from host_provisioner.errors import ProvisioningError
from host_provisioner.host_shell import CommandFailedError

DEFAULT_HINT = "Re-run with --verbose for a full trace."


@dataclass(frozen=True)
class FailureReport:
    """What failed, where, and with which exit status."""

    message: str
    operation: str
    line: str
    exit_status: int
    hint: str

    def render(self) -> str:
        return "\n".join(
            (
                f"Provisioning failed: {self.message}",
                f"   Command  : {self.operation}",
                f"   Exit code: {self.exit_status}",
                f"   Line     : {self.line}",
                f"Tip: {self.hint}",
            )
        )


def build_failure_report(error: ProvisioningError | CommandFailedError) -> FailureReport:
    """Translate a step failure into the run's failure report."""
    if isinstance(error, ProvisioningError):
        operation = error.operation or type(error).__name__
        exit_status = error.exit_status
        hint = error.hint or DEFAULT_HINT
    else:
        operation = error.command_text
        exit_status = error.returncode or 1
        hint = DEFAULT_HINT
    return FailureReport(
        message=str(error),
        operation=operation,
        line=_raise_site(error),
        exit_status=exit_status,
        hint=hint,
    )


def _raise_site(error: BaseException) -> str:
    frames = traceback.extract_tb(error.__traceback__) if error.__traceback__ else []
    if not frames:
        return "unknown"
    frame = frames[-1]
    return f"{Path(frame.filename).name}:{frame.lineno} in {frame.name}"
