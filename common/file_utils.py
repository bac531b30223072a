# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: timestamped backups, file writes and
scoped temporary files.
"""

import logging
import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from provisioning.config_models import AppSettings

from .command_utils import get_symbols, log_provisioner

module_logger = logging.getLogger(__name__)


def backup_path_for(file_path: Union[str, Path]) -> Path:
    """
    Return a free backup path of the form <file>.backup_<unix-epoch>.

    If a backup with that timestamp already exists, a numeric suffix is
    appended so an earlier backup is never overwritten.
    """
    source = Path(file_path)
    stem = f"{source.name}.backup_{int(time.time())}"
    candidate = source.with_name(stem)
    counter = 1
    while candidate.exists():
        candidate = source.with_name(f"{stem}.{counter}")
        counter += 1
    return candidate


def backup_file(
    file_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Copy a file to a timestamped backup next to it.

    Parameters:
        file_path: The file to back up.
        app_settings: Settings providing log symbols.
        current_logger: Logger to use. Defaults to the module logger.

    Returns:
        The backup path, or None if the file does not exist and no backup
        was needed.

    Raises:
        OSError: The copy failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    source = Path(file_path)

    if not source.is_file():
        log_provisioner(
            f"{symbols.get('info', 'ℹ️')} File {source} does not exist. No backup needed.",
            "info",
            logger_to_use,
            app_settings,
        )
        return None

    backup_path = backup_path_for(source)
    shutil.copy2(source, backup_path)
    log_provisioner(
        f"{symbols.get('success', '✅')} Backed up {source} to {backup_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return backup_path


def write_file(
    file_path: Union[str, Path],
    content: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Write text to a file, creating parent directories as needed."""
    logger_to_use = current_logger if current_logger else module_logger
    target = Path(file_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    log_provisioner(
        f"Wrote {len(content)} bytes to {target}",
        "debug",
        logger_to_use,
        app_settings,
    )


@contextmanager
def temporary_file(
    file_path: Union[str, Path],
    content: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Iterator[Path]:
    """
    Create a file for the duration of a with-block.

    The file is removed on every exit path, including exceptions raised
    inside the block. A failure to remove it is logged as a warning and
    does not mask the block's own exception.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    target = Path(file_path)

    write_file(target, content, app_settings, logger_to_use)
    log_provisioner(
        f"{symbols.get('info', 'ℹ️')} Created temporary file {target}",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        yield target
    finally:
        try:
            target.unlink()
            log_provisioner(
                f"{symbols.get('info', 'ℹ️')} Removed temporary file {target}",
                "info",
                logger_to_use,
                app_settings,
            )
        except FileNotFoundError:
            pass
        except OSError as e:
            log_provisioner(
                f"{symbols.get('warning', '!')} Could not remove temporary file {target}: {e}",
                "warning",
                logger_to_use,
                app_settings,
            )
