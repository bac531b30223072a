# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing external commands and logging their output.

Commands run synchronously with no timeout and are never retried; a single
invocation is the unit of work. Retry or fallback policy belongs to the
calling step.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from common.errors import COMMAND_NOT_FOUND_EXIT_CODE, ExternalCommandError
from provisioning.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    command: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def log_provisioner(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a provisioner message at the requested level.

    Args:
        message (str): The log message to be recorded.
        level (str): One of "debug", "info", "success", "warning", "error"
            or "critical". "success" is logged at INFO level.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to
            the module logger.
        app_settings (Optional[AppSettings]): Accepted for symmetry with the
            other helpers; symbols are already part of the message.
        exc_info (bool): Whether to attach the active exception traceback.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    allow_failure: bool = False,
    suppress_output: bool = False,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """
    Executes an external command, blocking until it exits.

    Args:
        command: The command as an argv list. A plain string is split on
            whitespace; no shell is involved.
        app_settings: Settings providing log symbols. May be None.
        allow_failure: When False, a non-zero exit raises
            ExternalCommandError. When True the result is returned as-is.
        suppress_output: Discard stdout and stderr instead of letting them
            reach the terminal.
        capture_output: Capture stdout and stderr as text into the result.
            Ignored when suppress_output is set.
        cmd_input: Text passed to the command's standard input.
        current_logger: Logger to use. Defaults to the module logger.
        cwd: Working directory for the command.
        env: Environment for the command. Defaults to the inherited one.

    Returns:
        CommandResult with the exit code and any captured output.

    Raises:
        ExternalCommandError: The command failed and allow_failure is False,
            or the executable could not be found (exit code 127).
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    argv = command.split() if isinstance(command, str) else list(command)
    command_str = subprocess.list2cmdline(argv)

    log_provisioner(
        f"{symbols.get('gear', '⚙️')} Executing: {command_str} {f'(in {cwd})' if cwd else ''}".rstrip(),
        "info",
        effective_logger,
        app_settings,
    )

    if suppress_output:
        stdout_target = stderr_target = subprocess.DEVNULL
    elif capture_output:
        stdout_target = stderr_target = subprocess.PIPE
    else:
        stdout_target = stderr_target = None

    try:
        completed = subprocess.run(
            argv,
            check=False,
            stdout=stdout_target,
            stderr=stderr_target,
            text=True,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
    except FileNotFoundError as e:
        missing = e.filename or argv[0]
        if allow_failure:
            log_provisioner(
                f"Command not found: {missing} (allowed).",
                "debug",
                effective_logger,
                app_settings,
            )
            return CommandResult(argv, COMMAND_NOT_FOUND_EXIT_CODE)
        log_provisioner(
            f"{symbols.get('error', '❌')} Command not found: {missing}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise ExternalCommandError(
            argv, COMMAND_NOT_FOUND_EXIT_CODE, str(e)
        ) from e

    stdout = completed.stdout or ""
    stderr = completed.stderr or ""
    if stdout.strip():
        log_provisioner(
            f"   stdout: {stdout.strip()}", "debug", effective_logger, app_settings
        )
    if stderr.strip():
        log_provisioner(
            f"   stderr: {stderr.strip()}", "debug", effective_logger, app_settings
        )

    result = CommandResult(argv, completed.returncode, stdout, stderr)
    if result.ok:
        return result

    if allow_failure:
        log_provisioner(
            f"Command `{command_str}` returned rc {result.exit_code} (allowed).",
            "debug",
            effective_logger,
            app_settings,
        )
        return result

    log_provisioner(
        f"{symbols.get('error', '❌')} Command `{command_str}` failed (rc {result.exit_code}).",
        "error",
        effective_logger,
        app_settings,
    )
    raise ExternalCommandError(argv, result.exit_code, stderr)


def command_exists(command_name: str) -> bool:
    """Return True if an executable named command_name is on PATH."""
    return shutil.which(command_name) is not None


def check_package_installed(
    package_name: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Checks whether an RPM package is installed using `rpm -q`.

    The query is read-only and its output is discarded. A missing `rpm`
    binary counts as "not installed".
    """
    result = run_command(
        ["rpm", "-q", package_name],
        app_settings,
        allow_failure=True,
        suppress_output=True,
        current_logger=current_logger,
    )
    return result.ok
