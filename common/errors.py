# common/errors.py
# -*- coding: utf-8 -*-
"""
Exception types raised by provisioning steps and helpers.

Every fatal condition is a ProvisioningError carrying the exit code the
process should terminate with. The sequencer catches these once; nothing
below the top-level entry point calls sys.exit().
"""

import subprocess
from typing import List, Optional, Sequence, Union

GENERIC_FAILURE_EXIT_CODE: int = 1
COMMAND_NOT_FOUND_EXIT_CODE: int = 127


class ProvisioningError(Exception):
    """Base class for all provisioning failures."""

    def __init__(
        self, message: str, exit_code: int = GENERIC_FAILURE_EXIT_CODE
    ):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ExternalCommandError(ProvisioningError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        command: Union[Sequence[str], str],
        exit_code: int,
        stderr: Optional[str] = None,
    ):
        self.command: List[str] = (
            [command] if isinstance(command, str) else list(command)
        )
        self.stderr = (stderr or "").strip()
        command_str = subprocess.list2cmdline(self.command)
        message = f"Command `{command_str}` failed (rc {exit_code})."
        if self.stderr:
            message = f"{message} stderr: {self.stderr}"
        super().__init__(message, exit_code=exit_code)


class PreconditionError(ProvisioningError):
    """The environment does not allow provisioning to start."""


class PreconditionWarning(ProvisioningError):
    """A best-effort action failed; the run logs a warning and continues."""


class DownloadError(ProvisioningError):
    """A remote file could not be downloaded."""


class ConfigurationError(ProvisioningError):
    """Settings could not be loaded or validated."""
