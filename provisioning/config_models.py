# provisioning/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for provisioner configuration.

This module defines the structured settings for the Docker CE provisioner,
including defaults, type annotations, and descriptions. Every value can be
overridden through the YAML config file, environment variables prefixed
with DOCKER_PROVISION_ (nested sections use '__'), or the command line.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[DOCKER-SETUP]"
ENV_PREFIX: str = "DOCKER_PROVISION_"

OS_RELEASE_PATH_DEFAULT: str = "/etc/os-release"
SUPPORTED_OS_NAME_DEFAULT: str = "CentOS Linux"
SUPPORTED_OS_VERSION_DEFAULT: str = "7"

YUM_REPO_DIR_DEFAULT: str = "/etc/yum.repos.d"
BASE_REPO_FILE_DEFAULT: str = "/etc/yum.repos.d/CentOS-Base.repo"
BASE_REPO_URL_DEFAULT: str = "http://mirrors.aliyun.com/repo/Centos-7.repo"
DOCKER_REPO_URL_DEFAULT: str = (
    "https://mirrors.aliyun.com/docker-ce/linux/centos/docker-ce.repo"
)
TEMP_REPO_NAME_DEFAULT: str = "docker-temp"
TEMP_REPO_BASEURL_DEFAULT: str = (
    "https://mirrors.aliyun.com/docker-ce/linux/centos/7/x86_64/stable/"
)
TEMP_REPO_GPGKEY_DEFAULT: str = (
    "https://mirrors.aliyun.com/docker-ce/linux/centos/gpg"
)

REPO_TOOLS_PACKAGE_DEFAULT: str = "yum-utils"
PREREQUISITE_PACKAGES_DEFAULT: List[str] = [
    "yum-utils",
    "device-mapper-persistent-data",
    "lvm2",
]
SELINUX_PROBE_PACKAGE_DEFAULT: str = "container-selinux"
SELINUX_COMPAT_PACKAGE_DEFAULT: str = "docker-ce-selinux"
RUNTIME_PACKAGE_DEFAULT: str = "docker-ce"

DOCKER_SERVICE_DEFAULT: str = "docker"
DOCKER_COMMAND_DEFAULT: str = "docker"
DAEMON_CONFIG_PATH_DEFAULT: str = "/etc/docker/daemon.json"
REGISTRY_MIRRORS_KEY: str = "registry-mirrors"
REGISTRY_MIRRORS_DEFAULT: List[str] = [
    "https://mirror.ccs.tencentyun.com",
    "https://docker.m.daocloud.io",
    "https://docker.mirrors.ustc.edu.cn",
    "http://hub-mirror.c.163.com",
]
SMOKE_TEST_IMAGE_DEFAULT: str = "nginx:latest"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "critical": "🔥",
    "debug": "🐛",
}


class PlatformSettings(BaseModel):
    """Supported operating system and privilege requirements."""

    os_release_path: Path = Field(
        default=Path(OS_RELEASE_PATH_DEFAULT),
        description="OS identification file read by the platform check.",
    )
    supported_name: str = Field(
        default=SUPPORTED_OS_NAME_DEFAULT,
        description="Required NAME field from the os-release file.",
    )
    supported_version: str = Field(
        default=SUPPORTED_OS_VERSION_DEFAULT,
        description="Required major VERSION_ID from the os-release file.",
    )
    require_root: bool = Field(
        default=True, description="Refuse to run without effective uid 0."
    )


class RepositorySettings(BaseModel):
    """Yum repository locations."""

    repo_dir: Path = Field(
        default=Path(YUM_REPO_DIR_DEFAULT),
        description="Directory holding yum .repo definition files.",
    )
    base_repo_file: Path = Field(
        default=Path(BASE_REPO_FILE_DEFAULT),
        description="Base repository file replaced by the mirror definition.",
    )
    base_repo_url: str = Field(
        default=BASE_REPO_URL_DEFAULT,
        description="URL of the mirror's base repository definition.",
    )
    docker_repo_url: str = Field(
        default=DOCKER_REPO_URL_DEFAULT,
        description="URL passed to yum-config-manager --add-repo.",
    )
    temp_repo_name: str = Field(
        default=TEMP_REPO_NAME_DEFAULT,
        description="Section and file name of the temporary selinux repo.",
    )
    temp_repo_baseurl: str = Field(default=TEMP_REPO_BASEURL_DEFAULT)
    temp_repo_gpgkey: str = Field(default=TEMP_REPO_GPGKEY_DEFAULT)
    download_timeout: float = Field(
        default=120.0,
        gt=0,
        description="HTTP timeout in seconds for the base repo download.",
    )

    @property
    def docker_repo_file(self) -> Path:
        """File yum-config-manager creates for docker_repo_url."""
        return self.repo_dir / self.docker_repo_url.rstrip("/").rsplit("/", 1)[-1]

    @property
    def temp_repo_file(self) -> Path:
        return self.repo_dir / f"{self.temp_repo_name}.repo"


class PackageSettings(BaseModel):
    """Package names installed or probed by the provisioning steps."""

    repo_tools: str = Field(
        default=REPO_TOOLS_PACKAGE_DEFAULT,
        description="Package providing yum-config-manager.",
    )
    prerequisites: List[str] = Field(
        default_factory=lambda: list(PREREQUISITE_PACKAGES_DEFAULT)
    )
    selinux_probe_package: str = Field(default=SELINUX_PROBE_PACKAGE_DEFAULT)
    selinux_compat_package: str = Field(default=SELINUX_COMPAT_PACKAGE_DEFAULT)
    runtime_package: str = Field(default=RUNTIME_PACKAGE_DEFAULT)


class DockerSettings(BaseModel):
    """Container runtime service and daemon configuration."""

    service_name: str = Field(default=DOCKER_SERVICE_DEFAULT)
    command: str = Field(
        default=DOCKER_COMMAND_DEFAULT,
        description="Container runtime CLI used for inspect/pull/version.",
    )
    daemon_config_path: Path = Field(default=Path(DAEMON_CONFIG_PATH_DEFAULT))
    registry_mirrors: List[str] = Field(
        default_factory=lambda: list(REGISTRY_MIRRORS_DEFAULT),
        description="Mirror endpoints, written in this order.",
    )
    smoke_test_image: str = Field(default=SMOKE_TEST_IMAGE_DEFAULT)


class AppSettings(BaseSettings):
    """Main provisioner settings."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT, description="Prefix for every log line."
    )
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(
        default=None, description="Optional file receiving a copy of the log."
    )
    use_color: bool = Field(
        default=True, description="Colour console output when it is a TTY."
    )

    platform: PlatformSettings = Field(default_factory=PlatformSettings)
    repositories: RepositorySettings = Field(
        default_factory=RepositorySettings
    )
    packages: PackageSettings = Field(default_factory=PackageSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )
