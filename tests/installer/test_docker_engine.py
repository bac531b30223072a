# tests/installer/test_docker_engine.py
from unittest.mock import create_autospec

import pytest

from common.command_utils import CommandResult
from common.errors import ExternalCommandError, ProvisioningError
from common.rhel.yum_manager import YumManager
from installer.components.docker_engine import (
    install_docker_ce,
    verify_docker_available,
)


def test_install_docker_ce_success(mocker, app_settings, mock_logger):
    """Test install_docker_ce installs the package, then starts the service."""
    mock_yum = create_autospec(YumManager)
    mocker.patch(
        "installer.components.docker_engine.YumManager", return_value=mock_yum
    )
    mock_enable = mocker.patch(
        "installer.components.docker_engine.systemd_enable_now"
    )

    install_docker_ce(app_settings, mock_logger)

    mock_yum.install.assert_called_once_with("docker-ce", skip_installed=False)
    mock_enable.assert_called_once_with("docker", app_settings, mock_logger)


def test_install_docker_ce_failure(mocker, app_settings, mock_logger):
    mock_yum = create_autospec(YumManager)
    mock_yum.install.side_effect = ExternalCommandError(["yum"], 1)
    mocker.patch(
        "installer.components.docker_engine.YumManager", return_value=mock_yum
    )
    mock_enable = mocker.patch(
        "installer.components.docker_engine.systemd_enable_now"
    )

    with pytest.raises(ExternalCommandError):
        install_docker_ce(app_settings, mock_logger)

    mock_enable.assert_not_called()


def test_verify_docker_available(mocker, app_settings, mock_logger):
    mocker.patch(
        "installer.components.docker_engine.command_exists", return_value=True
    )
    mock_run = mocker.patch(
        "installer.components.docker_engine.run_command",
        return_value=CommandResult(
            ["docker", "--version"], 0, "Docker version 26.1.4, build 5650f9b\n"
        ),
    )

    version = verify_docker_available(app_settings, mock_logger)

    assert version == "Docker version 26.1.4, build 5650f9b"
    mock_run.assert_called_once_with(
        ["docker", "--version"],
        app_settings,
        allow_failure=True,
        capture_output=True,
        current_logger=mock_logger,
    )


def test_verify_docker_missing(mocker, app_settings, mock_logger):
    mocker.patch(
        "installer.components.docker_engine.command_exists", return_value=False
    )

    with pytest.raises(ProvisioningError, match="not found") as exc_info:
        verify_docker_available(app_settings, mock_logger)

    assert exc_info.value.exit_code == 1


def test_verify_docker_version_fails(mocker, app_settings, mock_logger):
    mocker.patch(
        "installer.components.docker_engine.command_exists", return_value=True
    )
    mocker.patch(
        "installer.components.docker_engine.run_command",
        return_value=CommandResult(["docker", "--version"], 2),
    )

    with pytest.raises(ProvisioningError, match="rc 2") as exc_info:
        verify_docker_available(app_settings, mock_logger)

    assert exc_info.value.exit_code == 1
