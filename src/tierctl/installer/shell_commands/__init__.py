"""Shell command abstractions for the installer.

- helm: chart repositories and release management
- kubectl: cluster queries through the configured controller backend

Usage:
    from tierctl.installer.shell_commands import ShellCommands

    commands = ShellCommands(project_root=Path("."))
    commands.helm.repo_update()
    pods = commands.kubectl.get_pods("falco")
"""

from pathlib import Path

from tierctl.infra.k8s import KubernetesController, get_k8s_controller

from .helm import HelmCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner
from .types import CommandResult


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        helm: Helm-related commands
        kubectl: Kubernetes cluster commands
    """

    def __init__(
        self,
        project_root: Path,
        controller: KubernetesController | None = None,
    ) -> None:
        """Initialize the shell commands executor.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            controller: Kubernetes backend (defaults to the kubectl backend)
        """
        self._project_root = Path(project_root)
        self._runner = CommandRunner(self._project_root)

        self.helm = HelmCommands(self._runner)
        self.kubectl = KubectlCommands(
            self._runner, controller if controller is not None else get_k8s_controller()
        )

    @property
    def project_root(self) -> Path:
        """Get the project root path."""
        return self._project_root


__all__ = [
    "ShellCommands",
    "CommandResult",
    # Specialized command classes for direct usage
    "HelmCommands",
    "KubectlCommands",
    "CommandRunner",
]
