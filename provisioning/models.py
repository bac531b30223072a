# provisioning/models.py
# -*- coding: utf-8 -*-
"""
Data model for a provisioning run: the steps to execute and the state of
the run that executes them.
"""

import enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional

PRECONDITIONS_STEP_NAME = "preconditions"
FINAL_CHECK_STEP_NAME = "final capability check"
SIGNAL_EXIT_CODE_BASE = 128


def process_exit_code(return_code: int) -> int:
    """
    Map a child return code to a status for sys.exit.

    0 becomes 1 since a failed run is never successful. A negative code
    (killed by signal N) becomes 128 + N, as a shell reports it.
    """
    if return_code < 0:
        return SIGNAL_EXIT_CODE_BASE + abs(return_code)
    return return_code or 1


@dataclass(frozen=True)
class ProvisioningStep:
    """
    A single unit of idempotent work.

    action signals failure by raising. idempotency_check, when given, must
    be read-only and returns True when the work is already done.
    """

    tag: str
    name: str
    action: Callable[[], None]
    idempotency_check: Optional[Callable[[], bool]] = None


class RunOutcome(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class RunState:
    """
    State of one provisioning run.

    current_step_name always names the step whose action is executing or
    most recently failed.
    """

    current_step_name: Optional[str] = None
    outcome: RunOutcome = RunOutcome.IDLE
    exit_code: Optional[int] = None
    error: Optional[str] = None
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def start(self) -> None:
        self.outcome = RunOutcome.RUNNING
        self.exit_code = None
        self.error = None

    def enter(self, step_name: str) -> None:
        self.current_step_name = step_name

    def succeed(self) -> None:
        self.outcome = RunOutcome.SUCCEEDED
        self.exit_code = 0

    def fail(self, exit_code: int, error: str) -> None:
        self.outcome = RunOutcome.FAILED
        self.exit_code = process_exit_code(exit_code)
        self.error = error

    @property
    def finished(self) -> bool:
        return self.outcome in (RunOutcome.SUCCEEDED, RunOutcome.FAILED)
