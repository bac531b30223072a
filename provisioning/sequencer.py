# provisioning/sequencer.py
# -*- coding: utf-8 -*-
"""
Runs provisioning steps in their declared order.

The sequencer owns no global state: the caller passes in a RunState, the
sequencer records the active step, outcome and exit code on it, and the
caller decides what to do with the process exit status. The first fatal
error stops the run; PreconditionWarning from a step is logged and the run
continues.
"""

import logging
from typing import Callable, Optional, Sequence

from common.errors import PreconditionWarning, ProvisioningError
from provisioning.config_models import AppSettings
from provisioning.idempotency import is_satisfied
from provisioning.models import (
    FINAL_CHECK_STEP_NAME,
    PRECONDITIONS_STEP_NAME,
    ProvisioningStep,
    RunState,
)
from provisioning.preconditions import Precondition
from provisioning.reporter import Reporter

module_logger = logging.getLogger(__name__)


def execute_step(
    step: ProvisioningStep,
    run_state: RunState,
    app_settings: Optional[AppSettings],
    reporter: Reporter,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Execute a single step unless its idempotency probe says it is done.

    Marks the step as active on run_state before anything else, so a
    failure raised from here is attributed to it.

    Raises:
        ProvisioningError: Any fatal error from the step's action.
    """
    logger_to_use = current_logger if current_logger else module_logger
    run_state.enter(step.name)

    if is_satisfied(step, app_settings, logger_to_use):
        reporter.info(f"'{step.name}' is already done, skipping.")
        run_state.skipped_steps.append(step.tag)
        return

    try:
        step.action()
    except PreconditionWarning as warning:
        reporter.warn(f"{step.name}: {warning.message} (continuing)")
        run_state.warnings.append(f"{step.name}: {warning.message}")
        run_state.ran_steps.append(step.tag)
        return

    run_state.ran_steps.append(step.tag)
    reporter.success(f"Completed: {step.name}")


def _fail(
    run_state: RunState,
    reporter: Reporter,
    error: BaseException,
) -> RunState:
    # ExternalCommandError carries the command's own exit code.
    if isinstance(error, ProvisioningError):
        run_state.fail(error.exit_code, error.message)
    else:
        reporter.error(
            f"Unexpected error during '{run_state.current_step_name}': {error}",
            exc_info=True,
        )
        run_state.fail(1, str(error))
    return run_state


def run_provisioning(
    steps: Sequence[ProvisioningStep],
    app_settings: Optional[AppSettings],
    run_state: RunState,
    preconditions: Sequence[Precondition] = (),
    final_check: Optional[Callable[[], None]] = None,
    reporter: Optional[Reporter] = None,
    current_logger: Optional[logging.Logger] = None,
) -> RunState:
    """
    Run preconditions, then every step in order, then the final check.

    Args:
        steps: Steps in execution order.
        app_settings: Settings providing log symbols.
        run_state: State object updated in place and returned.
        preconditions: Callables raising PreconditionError when the
            environment is unsuitable. Any failure ends the run before the
            first step.
        final_check: Callable raising ProvisioningError when the installed
            capability is not usable.
        reporter: Reporter for status lines. Built from app_settings if None.
        current_logger: Logger to use. Defaults to the module logger.

    Returns:
        run_state, in SUCCEEDED or FAILED.
    """
    logger_to_use = current_logger if current_logger else module_logger
    reporter = reporter or Reporter(app_settings, logger_to_use)
    run_state.start()

    try:
        run_state.enter(PRECONDITIONS_STEP_NAME)
        for precondition in preconditions:
            precondition()

        reporter.start_banner([step.name for step in steps])
        for index, step in enumerate(steps, start=1):
            reporter.step_banner(index, len(steps), step.name)
            execute_step(step, run_state, app_settings, reporter, logger_to_use)

        if final_check is not None:
            run_state.enter(FINAL_CHECK_STEP_NAME)
            final_check()
    except Exception as error:
        return _fail(run_state, reporter, error)

    run_state.succeed()
    return run_state
