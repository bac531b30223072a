# installer/components/docker_engine.py
# -*- coding: utf-8 -*-
"""
Docker CE package installation, service activation and the post-install
capability check.
"""

import logging
from typing import Optional

from common.command_utils import (
    command_exists,
    get_symbols,
    log_provisioner,
    run_command,
)
from common.errors import ProvisioningError
from common.rhel.yum_manager import YumManager
from common.system_utils import systemd_enable_now
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def docker_installed(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    yum = YumManager(app_settings, current_logger or module_logger)
    return yum.is_installed(app_settings.packages.runtime_package)


def install_docker_ce(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Install docker-ce, then enable and start its service.

    Only called on a fresh install; an existing install is skipped by its
    idempotency probe and the service is left as it is.

    Raises:
        ExternalCommandError: The install or the service activation failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    package = app_settings.packages.runtime_package
    service = app_settings.docker.service_name

    log_provisioner(
        f"{symbols.get('package', '📦')} Installing {package}...",
        "info",
        logger_to_use,
        app_settings,
    )
    YumManager(app_settings, logger_to_use).install(package, skip_installed=False)
    log_provisioner(
        f"{symbols.get('success', '✅')} {package} installed",
        "info",
        logger_to_use,
        app_settings,
    )

    systemd_enable_now(service, app_settings, logger_to_use)
    log_provisioner(
        f"{symbols.get('success', '✅')} Service '{service}' enabled and started",
        "info",
        logger_to_use,
        app_settings,
    )


def verify_docker_available(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> str:
    """
    Confirm the runtime CLI is on PATH and answers `--version`.

    Returns:
        The version line reported by the CLI.

    Raises:
        ProvisioningError: The command is missing or fails (exit code 1).
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    docker_cmd = app_settings.docker.command

    if not command_exists(docker_cmd):
        raise ProvisioningError(
            f"Docker installation failed: command '{docker_cmd}' not found"
        )

    result = run_command(
        [docker_cmd, "--version"],
        app_settings,
        allow_failure=True,
        capture_output=True,
        current_logger=logger_to_use,
    )
    if not result.ok:
        raise ProvisioningError(
            f"Docker installation failed: '{docker_cmd} --version' returned rc {result.exit_code}"
        )

    version = result.stdout.strip()
    log_provisioner(
        f"{symbols.get('success', '✅')} Docker installed successfully: {version}",
        "info",
        logger_to_use,
        app_settings,
    )
    return version
