# provisioning/preconditions.py
# -*- coding: utf-8 -*-
"""
Environment checks that must pass before any step mutates the system.
"""

import logging
from typing import Callable, List, Optional

from common.command_utils import get_symbols, log_provisioner
from common.errors import PreconditionError
from common.system_utils import get_os_identity, is_root
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)

Precondition = Callable[[], None]


def check_privileges(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Raise PreconditionError unless running as root (when required)."""
    if not app_settings.platform.require_root:
        return
    if not is_root():
        raise PreconditionError("This script must be run as root!")
    log_provisioner(
        "Running with root privileges.",
        "debug",
        current_logger or module_logger,
        app_settings,
    )


def check_platform(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Raise PreconditionError unless os-release names the supported platform.

    Only the major part of VERSION_ID is compared ("7.9.2009" matches "7").
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    platform = app_settings.platform

    try:
        identity = get_os_identity(platform.os_release_path)
    except OSError as e:
        raise PreconditionError(
            f"Could not read {platform.os_release_path}: {e}"
        ) from e

    if (
        identity["name"] != platform.supported_name
        or identity["version"] != platform.supported_version
    ):
        raise PreconditionError(
            f"This script only supports {platform.supported_name} {platform.supported_version}, "
            f"current system: {identity['name']} {identity['version']}".rstrip()
        )

    log_provisioner(
        f"{symbols.get('info', 'ℹ️')} Detected system: {identity['name']} {identity['version']}",
        "info",
        logger_to_use,
        app_settings,
    )


def default_preconditions(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> List[Precondition]:
    """Privilege check first, then the platform check."""
    return [
        lambda: check_privileges(app_settings, current_logger),
        lambda: check_platform(app_settings, current_logger),
    ]
