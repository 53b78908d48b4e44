"""Run execution domain exports."""

from .failure_reporting import FailureReport, build_failure_report
from .provisioning_run_use_case import execute_provisioning_run
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "FailureReport",
    "RunOutcome",
    "RunRequest",
    "build_failure_report",
    "execute_provisioning_run",
]
