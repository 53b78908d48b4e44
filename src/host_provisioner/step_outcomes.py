"""Per-step outcome entities shared by every provisioning step."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StepSeverity(str, Enum):
    """How a completed step affects the provisioning run."""

    OK = "ok"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class StepOutcome:
    """Result of one pipeline step that did not abort the run.

    `messages` report progress; `warnings` hold the tolerated failures that
    made the step degraded.
    """

    step: str
    severity: StepSeverity
    messages: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @staticmethod
    def ok(step: str, *messages: str) -> StepOutcome:
        return StepOutcome(step=step, severity=StepSeverity.OK, messages=messages)

    @staticmethod
    def degraded(step: str, *warnings: str, messages: tuple[str, ...] = ()) -> StepOutcome:
        return StepOutcome(
            step=step, severity=StepSeverity.DEGRADED, messages=messages, warnings=warnings
        )

    @property
    def is_degraded(self) -> bool:
        return self.severity is StepSeverity.DEGRADED
