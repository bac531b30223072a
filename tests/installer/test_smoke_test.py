# tests/installer/test_smoke_test.py
import pytest

from common.command_utils import CommandResult
from common.errors import PreconditionWarning
from installer.components.smoke_test import (
    pull_smoke_test_image,
    smoke_test_image_present,
)


def test_image_present(mocker, app_settings, mock_logger):
    mock_run = mocker.patch(
        "installer.components.smoke_test.run_command",
        return_value=CommandResult(["docker"], 0),
    )

    assert smoke_test_image_present(app_settings, mock_logger) is True
    mock_run.assert_called_once_with(
        ["docker", "inspect", "nginx:latest"],
        app_settings,
        allow_failure=True,
        suppress_output=True,
        current_logger=mock_logger,
    )


def test_image_absent(mocker, app_settings, mock_logger):
    mocker.patch(
        "installer.components.smoke_test.run_command",
        return_value=CommandResult(["docker"], 1),
    )

    assert smoke_test_image_present(app_settings, mock_logger) is False


def test_pull_success(mocker, app_settings, mock_logger):
    mock_run = mocker.patch(
        "installer.components.smoke_test.run_command",
        return_value=CommandResult(["docker"], 0),
    )

    pull_smoke_test_image(app_settings, mock_logger)

    assert mock_run.call_args.args[0] == ["docker", "pull", "nginx:latest"]


def test_pull_failure_is_a_warning(mocker, app_settings, mock_logger):
    mocker.patch(
        "installer.components.smoke_test.run_command",
        return_value=CommandResult(["docker"], 1),
    )

    with pytest.raises(PreconditionWarning, match="nginx:latest"):
        pull_smoke_test_image(app_settings, mock_logger)
