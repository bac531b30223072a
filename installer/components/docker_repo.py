# installer/components/docker_repo.py
# -*- coding: utf-8 -*-
"""
Registers the Docker CE yum repository.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provisioner
from common.rhel.yum_manager import YumManager
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def docker_repo_registered(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    return app_settings.repositories.docker_repo_file.is_file()


def add_docker_repo(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Install the repository tooling (best effort), register the Docker CE
    repository and refresh the cache.

    Raises:
        ExternalCommandError: yum-config-manager or the cache rebuild failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    repo_url = app_settings.repositories.docker_repo_url
    yum = YumManager(app_settings, logger_to_use)

    # yum-config-manager ships in yum-utils; step 3 installs it for real.
    yum.install(
        app_settings.packages.repo_tools,
        allow_failure=True,
        suppress_output=True,
    )

    yum.add_repository(repo_url)
    log_provisioner(
        f"{symbols.get('success', '✅')} Added Docker CE repository: {repo_url}",
        "info",
        logger_to_use,
        app_settings,
    )

    yum.makecache()
