# installer/components/base_repo.py
# -*- coding: utf-8 -*-
"""
Replaces the CentOS base repository definition with the mirror's copy.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from common.command_utils import get_symbols, log_provisioner
from common.file_utils import backup_file
from common.network_utils import download_file
from common.rhel.yum_manager import YumManager
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def mirror_host(app_settings: AppSettings) -> str:
    return urlparse(app_settings.repositories.base_repo_url).netloc


def base_repo_configured(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    """True if the base repo file already points at the configured mirror."""
    repo_file = app_settings.repositories.base_repo_file
    if not repo_file.is_file():
        return False
    host = mirror_host(app_settings)
    return bool(host) and host in repo_file.read_text(
        encoding="utf-8", errors="replace"
    )


def configure_base_repo(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Back up the existing base repo file, download the mirror's definition
    over it, and rebuild the yum cache.

    Raises:
        DownloadError: The mirror definition could not be downloaded. The
            previous file is still available as the backup.
        ExternalCommandError: yum could not rebuild its cache.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    repos = app_settings.repositories

    backup_path = backup_file(repos.base_repo_file, app_settings, logger_to_use)
    if backup_path is not None:
        log_provisioner(
            f"{symbols.get('info', 'ℹ️')} Original {repos.base_repo_file.name} backed up as {backup_path.name}",
            "info",
            logger_to_use,
            app_settings,
        )

    download_file(
        repos.base_repo_url,
        repos.base_repo_file,
        app_settings,
        timeout=repos.download_timeout,
        current_logger=logger_to_use,
    )
    log_provisioner(
        f"{symbols.get('success', '✅')} Downloaded base repository definition from {mirror_host(app_settings)}",
        "info",
        logger_to_use,
        app_settings,
    )

    yum = YumManager(app_settings, logger_to_use)
    yum.clean_all()
    yum.makecache()
