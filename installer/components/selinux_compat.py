# installer/components/selinux_compat.py
# -*- coding: utf-8 -*-
"""
Works around a missing container-selinux package.

Older CentOS 7 hosts lack container-selinux, which docker-ce requires. The
legacy docker-ce-selinux package satisfies it and is only published in the
stable Docker CE tree, so a temporary repository pointing there is created
for the install and removed afterwards whatever the outcome.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provisioner
from common.errors import PreconditionWarning
from common.file_utils import temporary_file
from common.rhel.yum_manager import YumManager
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def render_temp_repo(app_settings: AppSettings) -> str:
    repos = app_settings.repositories
    return "\n".join(
        [
            f"[{repos.temp_repo_name}]",
            "name=Docker CE Temp Repo",
            f"baseurl={repos.temp_repo_baseurl}",
            "enabled=1",
            "gpgcheck=1",
            f"gpgkey={repos.temp_repo_gpgkey}",
            "",
        ]
    )


def selinux_support_present(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    """True if container-selinux or the compatibility package is installed."""
    yum = YumManager(app_settings, current_logger or module_logger)
    packages = app_settings.packages
    return yum.is_installed(packages.selinux_probe_package) or yum.is_installed(
        packages.selinux_compat_package
    )


def fix_container_selinux(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Install the compatibility package from a temporary repository.

    Raises:
        PreconditionWarning: The package could not be installed. The run
            continues; docker-ce's own install may still succeed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    packages = app_settings.packages

    log_provisioner(
        f"{symbols.get('warning', '⚠️')} {packages.selinux_probe_package} is not installed, trying {packages.selinux_compat_package}...",
        "warning",
        logger_to_use,
        app_settings,
    )

    yum = YumManager(app_settings, logger_to_use)
    with temporary_file(
        app_settings.repositories.temp_repo_file,
        render_temp_repo(app_settings),
        app_settings,
        logger_to_use,
    ):
        installed = yum.install(
            packages.selinux_compat_package,
            skip_installed=False,
            allow_failure=True,
        )

    if not installed:
        raise PreconditionWarning(
            f"Could not install {packages.selinux_compat_package}; the Docker CE install may be affected"
        )
    log_provisioner(
        f"{symbols.get('success', '✅')} Installed {packages.selinux_compat_package}",
        "info",
        logger_to_use,
        app_settings,
    )
