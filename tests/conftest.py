# tests/conftest.py
import logging
import os
import subprocess
from typing import Dict, List, Optional, Set, Tuple

import pytest
import requests

from common.core_utils import SymbolFormatter
from provisioning.config_models import (
    AppSettings,
    DockerSettings,
    PlatformSettings,
    RepositorySettings,
)

CENTOS7_OS_RELEASE = (
    'NAME="CentOS Linux"\n'
    'VERSION="7 (Core)"\n'
    'ID="centos"\n'
    'ID_LIKE="rhel fedora"\n'
    'VERSION_ID="7"\n'
    'PRETTY_NAME="CentOS Linux 7 (Core)"\n'
)

ORIGINAL_BASE_REPO = (
    "[base]\n"
    "name=CentOS-$releasever - Base\n"
    "mirrorlist=http://mirrorlist.centos.org/?release=$releasever&arch=$basearch&repo=os\n"
)

MIRROR_BASE_REPO = (
    "[base]\n"
    "name=CentOS-$releasever - Base - mirrors.aliyun.com\n"
    "baseurl=http://mirrors.aliyun.com/centos/$releasever/os/$basearch/\n"
)

DOCKER_VERSION_LINE = "Docker version 26.1.4, build 5650f9b"


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging replaces root handlers; drop the ones it installed."""
    root_logger = logging.getLogger()
    saved_level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, SymbolFormatter):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)


@pytest.fixture(autouse=True)
def clean_provision_env(monkeypatch):
    """Keep DOCKER_PROVISION_* variables from the outer shell out of tests."""
    for key in list(os.environ):
        if key.startswith("DOCKER_PROVISION_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mock_logger():
    return logging.getLogger("tests.provisioning")


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    """Settings with every host path rooted in tmp_path."""
    os_release = tmp_path / "os-release"
    os_release.write_text(CENTOS7_OS_RELEASE, encoding="utf-8")

    repo_dir = tmp_path / "yum.repos.d"
    repo_dir.mkdir()
    base_repo_file = repo_dir / "CentOS-Base.repo"
    base_repo_file.write_text(ORIGINAL_BASE_REPO, encoding="utf-8")

    return AppSettings(
        use_color=False,
        platform=PlatformSettings(os_release_path=os_release),
        repositories=RepositorySettings(
            repo_dir=repo_dir, base_repo_file=base_repo_file
        ),
        docker=DockerSettings(
            daemon_config_path=tmp_path / "docker" / "daemon.json"
        ),
    )


class FakeResponse:
    def __init__(self, url: str, content: bytes, status_code: int = 200):
        self.url = url
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} Error for url: {self.url}"
            )


class FakeSystem:
    """
    Simulates the commands and HTTP endpoint a CentOS 7 host offers.

    Package state lives in `installed`. docker-ce is only installable once
    the Docker repository file exists, docker-ce-selinux only while the
    temporary repository file exists, and yum-config-manager only once
    yum-utils is installed.
    """

    READ_ONLY_PREFIXES: Tuple[Tuple[str, ...], ...] = (
        ("rpm", "-q"),
        ("docker", "inspect"),
        ("docker", "--version"),
    )

    def __init__(self, app_settings: AppSettings):
        self.app_settings = app_settings
        self.installed: Set[str] = set()
        self.images: Set[str] = set()
        self.calls: List[List[str]] = []
        self.downloads: List[str] = []
        self.failures: Dict[Tuple[str, ...], int] = {}
        self.download_error: Optional[Exception] = None
        self.download_status = 200
        self.temp_repo_seen_by: List[str] = []
        self.enabled_services: Set[str] = set()
        self.restarts: List[str] = []

    # --- configuration helpers for tests ---

    def fail(self, *argv_prefix: str, exit_code: int = 1) -> None:
        self.failures[tuple(argv_prefix)] = exit_code

    def provisioned(self) -> None:
        """Put the host in the state a completed run leaves behind."""
        repos = self.app_settings.repositories
        repos.base_repo_file.write_text(MIRROR_BASE_REPO, encoding="utf-8")
        repos.docker_repo_file.write_text("[docker-ce-stable]\n", encoding="utf-8")
        self.installed.update(self.app_settings.packages.prerequisites)
        self.installed.update({"container-selinux", "docker-ce"})
        daemon_config = self.app_settings.docker.daemon_config_path
        daemon_config.parent.mkdir(parents=True, exist_ok=True)
        daemon_config.write_text(
            '{\n  "registry-mirrors": ["https://mirror.ccs.tencentyun.com"]\n}\n',
            encoding="utf-8",
        )
        self.images.add(self.app_settings.docker.smoke_test_image)

    # --- views on the recorded calls ---

    @property
    def mutating_calls(self) -> List[List[str]]:
        return [
            call
            for call in self.calls
            if not any(
                tuple(call[: len(prefix)]) == prefix
                for prefix in self.READ_ONLY_PREFIXES
            )
        ]

    def index_of(self, *argv_prefix: str) -> int:
        for index, call in enumerate(self.calls):
            if tuple(call[: len(argv_prefix)]) == argv_prefix:
                return index
        raise AssertionError(f"{argv_prefix} was never called: {self.calls}")

    def was_called(self, *argv_prefix: str) -> bool:
        return any(
            tuple(call[: len(argv_prefix)]) == argv_prefix
            for call in self.calls
        )

    # --- patched entry points ---

    def which(self, name: str) -> Optional[str]:
        if name == self.app_settings.docker.command and "docker-ce" in self.installed:
            return f"/usr/bin/{name}"
        return None

    def http_get(self, url: str, timeout: float = None) -> FakeResponse:
        self.downloads.append(url)
        if self.download_error is not None:
            raise self.download_error
        return FakeResponse(
            url, MIRROR_BASE_REPO.encode("utf-8"), self.download_status
        )

    def run(
        self,
        argv,
        check=False,
        stdout=None,
        stderr=None,
        text=True,
        input=None,
        cwd=None,
        env=None,
    ) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append(argv)
        capture = stdout == subprocess.PIPE

        for prefix, exit_code in self.failures.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return self._completed(argv, exit_code, "", "simulated failure", capture)

        program = argv[0]
        handler = {
            "rpm": self._rpm,
            "yum": self._yum,
            "yum-config-manager": self._yum_config_manager,
            "systemctl": self._systemctl,
            self.app_settings.docker.command: self._docker,
        }.get(program)
        if handler is None:
            raise FileNotFoundError(2, "No such file or directory", program)
        exit_code, out = handler(argv)
        return self._completed(argv, exit_code, out, "", capture)

    @staticmethod
    def _completed(argv, exit_code, out, err, capture):
        return subprocess.CompletedProcess(
            argv,
            exit_code,
            stdout=out if capture else None,
            stderr=err if capture else None,
        )

    def _rpm(self, argv):
        return (0 if argv[2] in self.installed else 1), ""

    def _available(self, package: str) -> bool:
        repos = self.app_settings.repositories
        if package == "docker-ce":
            return repos.docker_repo_file.exists()
        if package == "docker-ce-selinux":
            return repos.temp_repo_file.exists()
        return True

    def _yum(self, argv):
        if argv[1] == "install":
            packages = argv[3:]
            if not all(self._available(pkg) for pkg in packages):
                return 1, ""
            if self.app_settings.repositories.temp_repo_file.exists():
                self.temp_repo_seen_by.extend(packages)
            self.installed.update(packages)
            if "docker-ce" in packages:
                self.installed.add("container-selinux")
            return 0, ""
        return 0, ""

    def _yum_config_manager(self, argv):
        if "yum-utils" not in self.installed:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        self.app_settings.repositories.docker_repo_file.write_text(
            f"# added from {argv[-1]}\n[docker-ce-stable]\n", encoding="utf-8"
        )
        return 0, ""

    def _systemctl(self, argv):
        action = argv[1]
        if action == "enable":
            self.enabled_services.add(argv[2])
        elif action == "restart":
            self.restarts.append(argv[2])
        return 0, ""

    def _docker(self, argv):
        if "docker-ce" not in self.installed:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        subcommand = argv[1]
        if subcommand == "--version":
            return 0, DOCKER_VERSION_LINE + "\n"
        if subcommand == "inspect":
            return (0 if argv[2] in self.images else 1), ""
        if subcommand == "pull":
            self.images.add(argv[2])
            return 0, ""
        return 0, ""


@pytest.fixture
def fake_system(mocker, app_settings) -> FakeSystem:
    system = FakeSystem(app_settings)
    mocker.patch("common.command_utils.subprocess.run", side_effect=system.run)
    mocker.patch("common.command_utils.shutil.which", side_effect=system.which)
    mocker.patch(
        "common.network_utils.requests.get", side_effect=system.http_get
    )
    system.geteuid = mocker.patch(
        "common.system_utils.os.geteuid", return_value=0
    )
    return system
