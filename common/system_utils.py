# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions: privilege and OS identification probes and
systemd service management.
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, Optional, Union

from common.command_utils import get_symbols, log_provisioner, run_command
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def is_root() -> bool:
    """Return True when running with effective uid 0."""
    return os.geteuid() == 0


def read_os_release(os_release_path: Union[str, Path]) -> Dict[str, str]:
    """
    Parse an os-release file into a dict.

    Values may be quoted; quotes are removed. Comments and malformed lines
    are ignored.

    Raises:
        OSError: The file could not be read.
    """
    fields: Dict[str, str] = {}
    text = Path(os_release_path).read_text(encoding="utf-8")
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            parts = [raw_value.strip("\"'")]
        fields[key.strip()] = parts[0] if parts else ""
    return fields


def get_os_identity(
    os_release_path: Union[str, Path],
) -> Dict[str, str]:
    """Return the NAME and major VERSION_ID from an os-release file."""
    fields = read_os_release(os_release_path)
    version_id = fields.get("VERSION_ID", "")
    return {
        "name": fields.get("NAME", ""),
        "version": version_id.split(".", 1)[0],
    }


def systemd_reload(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Reload the systemd manager configuration."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    log_provisioner(
        f"{symbols.get('gear', '⚙️')} Reloading systemd daemon...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        ["systemctl", "daemon-reload"],
        app_settings,
        current_logger=logger_to_use,
    )


def systemd_enable_now(
    service_name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Enable a service at boot and start it immediately."""
    logger_to_use = current_logger if current_logger else module_logger
    run_command(
        ["systemctl", "enable", service_name, "--now"],
        app_settings,
        suppress_output=True,
        current_logger=logger_to_use,
    )


def systemd_restart(
    service_name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    run_command(
        ["systemctl", "restart", service_name],
        app_settings,
        current_logger=logger_to_use,
    )
