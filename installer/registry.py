"""
Registry of provisioning steps.

The order of STEP_DEFINITIONS is the execution order. Later steps rely on
earlier ones: the Docker CE install needs the repository registered by
DOCKER_REPO, the registry mirror restart needs the service from
DOCKER_ENGINE.
"""

import logging
from typing import Callable, List, NamedTuple, Optional

from installer.components.base_repo import base_repo_configured, configure_base_repo
from installer.components.dependencies import (
    dependencies_installed,
    install_dependencies,
)
from installer.components.docker_engine import docker_installed, install_docker_ce
from installer.components.docker_repo import add_docker_repo, docker_repo_registered
from installer.components.registry_mirror import (
    registry_mirror_configured,
    setup_registry_mirror,
)
from installer.components.selinux_compat import (
    fix_container_selinux,
    selinux_support_present,
)
from installer.components.smoke_test import (
    pull_smoke_test_image,
    smoke_test_image_present,
)
from provisioning.config_models import AppSettings
from provisioning.models import ProvisioningStep

StepFunction = Callable[[AppSettings, Optional[logging.Logger]], object]


class StepDefinition(NamedTuple):
    tag: str
    name: str
    action: StepFunction
    check: Optional[StepFunction]


STEP_DEFINITIONS: List[StepDefinition] = [
    StepDefinition(
        "BASE_REPO",
        "Configure CentOS base repository mirror",
        configure_base_repo,
        base_repo_configured,
    ),
    StepDefinition(
        "DOCKER_REPO",
        "Add Docker CE repository",
        add_docker_repo,
        docker_repo_registered,
    ),
    StepDefinition(
        "DEPENDENCIES",
        "Install dependency packages",
        install_dependencies,
        dependencies_installed,
    ),
    StepDefinition(
        "SELINUX_COMPAT",
        "Handle container-selinux dependency",
        fix_container_selinux,
        selinux_support_present,
    ),
    StepDefinition(
        "DOCKER_ENGINE",
        "Install Docker CE",
        install_docker_ce,
        docker_installed,
    ),
    StepDefinition(
        "REGISTRY_MIRROR",
        "Configure registry mirrors",
        setup_registry_mirror,
        registry_mirror_configured,
    ),
    StepDefinition(
        "SMOKE_TEST",
        "Test pull of smoke-test image",
        pull_smoke_test_image,
        smoke_test_image_present,
    ),
]


def _bind(
    func: StepFunction,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger],
):
    def bound():
        return func(app_settings, current_logger)

    bound.__name__ = func.__name__
    return bound


def build_steps(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> List[ProvisioningStep]:
    """
    Build the ordered provisioning steps bound to the given settings.

    Args:
        app_settings: The application settings.
        current_logger: Logger passed to every step function.

    Returns:
        The seven steps, in execution order.
    """
    return [
        ProvisioningStep(
            tag=definition.tag,
            name=definition.name,
            action=_bind(definition.action, app_settings, current_logger),
            idempotency_check=(
                _bind(definition.check, app_settings, current_logger)
                if definition.check
                else None
            ),
        )
        for definition in STEP_DEFINITIONS
    ]


def step_tags() -> List[str]:
    return [definition.tag for definition in STEP_DEFINITIONS]
