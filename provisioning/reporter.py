# provisioning/reporter.py
# -*- coding: utf-8 -*-
"""
Human-readable progress reporting for a provisioning run.

Every line goes through the logging setup from common.core_utils, so level
routing (stdout vs stderr), symbols and colours are decided there.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provisioner
from provisioning.config_models import AppSettings
from provisioning.models import RunOutcome, RunState

module_logger = logging.getLogger(__name__)

BANNER_RULE = "=" * 40


class Reporter:
    """Leveled status lines plus the final run summary."""

    def __init__(
        self,
        app_settings: Optional[AppSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger
        self.symbols = get_symbols(app_settings)

    def _emit(self, message: str, level: str, exc_info: bool = False) -> None:
        log_provisioner(
            message, level, self.logger, self.app_settings, exc_info=exc_info
        )

    def info(self, message: str) -> None:
        self._emit(message, "info")

    def warn(self, message: str) -> None:
        self._emit(message, "warning")

    def error(self, message: str, exc_info: bool = False) -> None:
        self._emit(message, "error", exc_info=exc_info)

    def success(self, message: str) -> None:
        self._emit(f"{self.symbols.get('success', '✅')} {message}", "success")

    def step_banner(self, index: int, total: int, name: str) -> None:
        self.info(
            f"--- {self.symbols.get('step', '➡️')} [{index}/{total}] {name} ---"
        )

    def start_banner(self, step_names) -> None:
        self.info(BANNER_RULE)
        self.info("Starting Docker CE installation")
        self.info(f"Steps: {' → '.join(step_names)}")
        self.info(BANNER_RULE)

    def summary(self, run_state: RunState) -> None:
        """Print the final outcome of a run."""
        if run_state.outcome is RunOutcome.SUCCEEDED:
            self.success(
                f"Provisioning completed: {len(run_state.ran_steps)} step(s) ran, "
                f"{len(run_state.skipped_steps)} already satisfied."
            )
            for warning in run_state.warnings:
                self.warn(f"Completed with warning: {warning}")
            self.info(
                "Hint: run 'docker run -d -p 80:80 nginx' to start a test container."
            )
            self.info(f"{self.symbols.get('rocket', '🚀')} Installation complete!")
        elif run_state.outcome is RunOutcome.FAILED:
            self.error("Provisioning failed!")
            self.error(f"Current step: {run_state.current_step_name}")
            if run_state.error:
                self.error(f"Reason: {run_state.error}")
            self.error(f"Exit code: {run_state.exit_code}")
        else:
            self.warn(
                f"Provisioning did not finish (state: {run_state.outcome.value})."
            )
