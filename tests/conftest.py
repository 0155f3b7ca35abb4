import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Keep config loading independent of the developer's shell
for _var in ("TIERCTL_TOOLS_DIR", "TIERCTL_FAILURE_POLICY", "TIERCTL_K8S_BACKEND"):
    os.environ.pop(_var, None)

from tierctl.infra.constants import InstallerPaths  # noqa: E402
from tierctl.infra.k8s.controller import CommandResult, PodInfo  # noqa: E402


class FakeClock:
    """Monotonic clock whose time only moves when ``sleep`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_console() -> MagicMock:
    """Console double recording every call."""
    return MagicMock()


@pytest.fixture
def mock_commands() -> MagicMock:
    """ShellCommands double where every cluster and helm call succeeds."""
    commands = MagicMock()
    commands.helm.available.return_value = True
    commands.helm.upgrade_install.return_value = CommandResult(success=True)
    commands.helm.uninstall.return_value = CommandResult(success=True)
    commands.helm.repo_add.return_value = CommandResult(success=True)
    commands.helm.repo_update.return_value = CommandResult(success=True)

    commands.kubectl.available.return_value = True
    commands.kubectl.cluster_reachable.return_value = True
    commands.kubectl.get_current_context.return_value = "test-cluster"
    commands.kubectl.count_nodes.return_value = 3
    commands.kubectl.get_pods.return_value = [PodInfo("pod-0", "Running")]
    commands.kubectl.get_pods_wide.return_value = "NAME  READY  STATUS\n"
    commands.kubectl.get_pod_logs.return_value = CommandResult(success=True, stdout="")
    commands.kubectl.get_custom_objects.return_value = []
    commands.kubectl.crd_exists.return_value = False
    commands.kubectl.apply_manifest.return_value = CommandResult(success=True)
    commands.kubectl.delete_manifest.return_value = CommandResult(success=True)
    commands.kubectl.delete_all.return_value = CommandResult(success=True)
    commands.kubectl.delete_named.return_value = CommandResult(success=True)
    commands.kubectl.delete_resources_by_label.return_value = CommandResult(success=True)
    commands.kubectl.delete_namespace.return_value = CommandResult(success=True)
    return commands


@pytest.fixture
def tools_paths(tmp_path: Path) -> InstallerPaths:
    """Paths rooted in an empty temporary project."""
    return InstallerPaths(tmp_path)
