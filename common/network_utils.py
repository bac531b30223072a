# common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from common.errors import DownloadError
from provisioning.config_models import AppSettings

from .command_utils import get_symbols, log_provisioner

module_logger = logging.getLogger(__name__)


def download_file(
    url: str,
    destination: Union[str, Path],
    app_settings: Optional[AppSettings],
    timeout: float = 120.0,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download url to destination, overwriting it.

    The body is fetched completely before destination is opened, so a failed
    request leaves any existing file untouched.

    Raises:
        DownloadError: On any HTTP, connection, timeout or write error.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    target = Path(destination)

    log_provisioner(
        f"{symbols.get('info', 'ℹ️')} Downloading {url} to {target}",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as http_err:
        raise DownloadError(
            f"HTTP error downloading {url}: {http_err}"
        ) from http_err
    except requests.exceptions.ConnectionError as conn_err:
        raise DownloadError(
            f"Connection error downloading {url}: {conn_err}"
        ) from conn_err
    except requests.exceptions.Timeout as timeout_err:
        raise DownloadError(
            f"Timed out downloading {url}: {timeout_err}"
        ) from timeout_err
    except requests.exceptions.RequestException as req_err:
        raise DownloadError(
            f"Unexpected error downloading {url}: {req_err}"
        ) from req_err

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(response.content)
    except OSError as io_err:
        raise DownloadError(
            f"Could not write {target}: {io_err}"
        ) from io_err

    log_provisioner(
        f"{symbols.get('success', '✅')} Downloaded {url} ({len(response.content)} bytes)",
        "info",
        logger_to_use,
        app_settings,
    )
    return target
