# installer/components/registry_mirror.py
# -*- coding: utf-8 -*-
"""
Configures Docker registry mirrors in the daemon configuration file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from common.command_utils import get_symbols, log_provisioner
from common.file_utils import backup_file, write_file
from common.system_utils import systemd_reload, systemd_restart
from provisioning.config_models import REGISTRY_MIRRORS_KEY, AppSettings

module_logger = logging.getLogger(__name__)


def _load_daemon_config(config_path: Path) -> Optional[Dict[str, Any]]:
    """
    Return the parsed daemon config, {} if the file is absent or blank, or
    None if it exists but is not a JSON object.

    Bytes that are not valid UTF-8 are replaced rather than rejected.
    """
    if not config_path.is_file():
        return {}
    text = config_path.read_text(encoding="utf-8", errors="replace")
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def registry_mirror_configured(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    """True if the daemon config already has a registry-mirrors entry."""
    config_path = app_settings.docker.daemon_config_path
    if not config_path.is_file():
        return False
    data = _load_daemon_config(config_path)
    if data is None:
        # Unparseable: fall back to a plain text search for the key.
        return f'"{REGISTRY_MIRRORS_KEY}"' in config_path.read_text(
            encoding="utf-8", errors="replace"
        )
    return REGISTRY_MIRRORS_KEY in data


def render_daemon_config(existing: Dict[str, Any], mirrors: List[str]) -> str:
    merged = dict(existing)
    merged[REGISTRY_MIRRORS_KEY] = list(mirrors)
    return json.dumps(merged, indent=2) + "\n"


def setup_registry_mirror(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Write the mirror list into the daemon config and restart the service.

    Keys already present in a valid config are kept. A file that is not a
    JSON object is backed up and replaced.

    Raises:
        ExternalCommandError: The systemd reload or restart failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    docker = app_settings.docker
    config_path = docker.daemon_config_path

    existing = _load_daemon_config(config_path)
    if existing is None:
        log_provisioner(
            f"{symbols.get('warning', '⚠️')} {config_path} is not a valid JSON object, replacing it",
            "warning",
            logger_to_use,
            app_settings,
        )
        backup_file(config_path, app_settings, logger_to_use)
        existing = {}

    log_provisioner(
        f"{symbols.get('info', 'ℹ️')} Configuring registry mirrors ({len(docker.registry_mirrors)} total)...",
        "info",
        logger_to_use,
        app_settings,
    )
    write_file(
        config_path,
        render_daemon_config(existing, docker.registry_mirrors),
        app_settings,
        logger_to_use,
    )

    systemd_reload(app_settings, logger_to_use)
    systemd_restart(docker.service_name, app_settings, logger_to_use)
    log_provisioner(
        f"{symbols.get('success', '✅')} Registry mirror configuration complete",
        "info",
        logger_to_use,
        app_settings,
    )
