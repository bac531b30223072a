# provisioning/idempotency.py
# -*- coding: utf-8 -*-
"""
Decides whether a provisioning step's work is already done.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provisioner
from common.errors import ExternalCommandError
from provisioning.config_models import AppSettings
from provisioning.models import ProvisioningStep

module_logger = logging.getLogger(__name__)


def is_satisfied(
    step: ProvisioningStep,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Run the step's read-only probe.

    Returns False when the step has no probe. A probe that fails with a
    command or OS error is reported as a warning and treated as "not
    satisfied", so the step's action runs.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if step.idempotency_check is None:
        return False

    try:
        return bool(step.idempotency_check())
    except (ExternalCommandError, OSError) as e:
        symbols = get_symbols(app_settings)
        log_provisioner(
            f"{symbols.get('warning', '!')} Could not determine whether '{step.name}' is already done ({e}); running it.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
