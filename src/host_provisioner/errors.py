"""Shared provisioning error base."""

from __future__ import annotations


class ProvisioningError(Exception):
    """Base for every failure surfaced by a provisioning step.

    Attributes:
      exit_status: Status the provisioning run terminates with.
      operation: Failing command text or step description.
      hint: Optional remediation guidance for the operator.
    """

    default_hint: str | None = None

    def __init__(
        self,
        message: str,
        *,
        exit_status: int = 1,
        operation: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exit_status = exit_status or 1
        self.operation = operation
        self.hint = hint or self.default_hint
