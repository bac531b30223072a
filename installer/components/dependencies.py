# installer/components/dependencies.py
# -*- coding: utf-8 -*-
"""
Installs the system packages Docker CE needs on CentOS 7.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provisioner
from common.rhel.yum_manager import YumManager
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def dependencies_installed(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    yum = YumManager(app_settings, current_logger or module_logger)
    return yum.all_installed(list(app_settings.packages.prerequisites))


def install_dependencies(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    packages = list(app_settings.packages.prerequisites)

    log_provisioner(
        f"{symbols.get('package', '📦')} Installing dependencies: {' '.join(packages)}",
        "info",
        logger_to_use,
        app_settings,
    )
    YumManager(app_settings, logger_to_use).install(packages)
