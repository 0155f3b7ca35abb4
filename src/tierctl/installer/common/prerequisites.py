from __future__ import annotations

from typing import TYPE_CHECKING

from tierctl.errors import PrerequisiteError
from tierctl.utils.console_like import ConsoleLike, coalesce_console

if TYPE_CHECKING:
    from tierctl.installer.shell_commands import ShellCommands


def check_prerequisites(
    commands: ShellCommands, console: ConsoleLike | None = None
) -> None:
    """Ensure helm and kubectl are installed and the cluster answers.

    Raises:
        PrerequisiteError: Naming the first missing piece
    """
    out = coalesce_console(console)

    if not commands.helm.available():
        raise PrerequisiteError(
            "helm not found", "Install Helm 3: https://helm.sh/docs/intro/install/"
        )
    if not commands.kubectl.available():
        raise PrerequisiteError(
            "kubectl not found",
            "Install kubectl: https://kubernetes.io/docs/tasks/tools/",
        )
    if not commands.kubectl.cluster_reachable():
        context = commands.kubectl.get_current_context()
        raise PrerequisiteError(
            "Cannot reach the Kubernetes cluster",
            f"Current context: {context}\nCheck your kubeconfig and cluster status.",
        )

    out.ok("Prerequisites OK (helm, kubectl, cluster reachable)")
