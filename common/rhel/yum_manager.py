# common/rhel/yum_manager.py
# -*- coding: utf-8 -*-
import logging
from typing import List, Optional, Union

from common.command_utils import (
    check_package_installed,
    run_command,
)
from provisioning.config_models import AppSettings


class YumManager:
    """
    A thin manager for yum/rpm package operations on CentOS hosts.

    Every method runs commands through run_command, so a failing command
    raises ExternalCommandError unless the method says otherwise.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)

    def is_installed(self, package: str) -> bool:
        return check_package_installed(
            package, self.app_settings, current_logger=self.logger
        )

    def missing_packages(self, packages: Union[List[str], str]) -> List[str]:
        """Return the subset of packages that `rpm -q` reports as absent."""
        if not isinstance(packages, list):
            packages = [packages]
        return [pkg for pkg in packages if not self.is_installed(pkg)]

    def all_installed(self, packages: Union[List[str], str]) -> bool:
        return not self.missing_packages(packages)

    def install(
        self,
        packages: Union[List[str], str],
        skip_installed: bool = True,
        allow_failure: bool = False,
        suppress_output: bool = False,
    ) -> bool:
        """
        Installs one or more packages using 'yum install -y'.

        Args:
            packages: A single package name or a list of package names.
            skip_installed: Only request packages not already installed.
            allow_failure: Return False instead of raising on failure.
            suppress_output: Discard yum's output.

        Returns:
            True if the packages are installed afterwards (or were already),
            False if yum failed and allow_failure is set.
        """
        if not isinstance(packages, list):
            packages = [packages]

        to_install = (
            self.missing_packages(packages) if skip_installed else packages
        )
        if not to_install:
            self.logger.info("All requested packages are already installed.")
            return True

        self.logger.info(f"Installing packages: {', '.join(to_install)}")
        result = run_command(
            ["yum", "install", "-y"] + to_install,
            self.app_settings,
            allow_failure=allow_failure,
            suppress_output=suppress_output,
            current_logger=self.logger,
        )
        if not result.ok:
            self.logger.warning(
                f"yum could not install: {', '.join(to_install)} (rc {result.exit_code})"
            )
            return False
        return True

    def add_repository(self, repo_url: str) -> None:
        """Register a remote .repo definition with yum-config-manager."""
        self.logger.info(f"Adding yum repository: {repo_url}")
        run_command(
            ["yum-config-manager", "--add-repo", repo_url],
            self.app_settings,
            suppress_output=True,
            current_logger=self.logger,
        )

    def clean_all(self) -> None:
        run_command(
            ["yum", "clean", "all"],
            self.app_settings,
            suppress_output=True,
            current_logger=self.logger,
        )

    def makecache(self) -> None:
        """Rebuild the metadata cache ('yum makecache fast')."""
        run_command(
            ["yum", "makecache", "fast"],
            self.app_settings,
            suppress_output=True,
            current_logger=self.logger,
        )
        self.logger.info("Yum metadata cache updated.")
