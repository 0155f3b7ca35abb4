"""Kubectl command abstractions.

Synchronous wrapper over the async KubernetesController, plus the
kubectl binary check used by the prerequisite step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tierctl.infra.k8s.controller import KubernetesController, KubernetesControllerSync

if TYPE_CHECKING:
    from .runner import CommandRunner


class KubectlCommands(KubernetesControllerSync):
    """Kubectl-related commands.

    Every cluster query delegates to the configured controller backend via
    run_sync(); see KubernetesControllerSync for the full method list.
    """

    def __init__(self, runner: CommandRunner, controller: KubernetesController) -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner, used for binary detection
            controller: Backend that performs the cluster operations
        """
        super().__init__(controller)
        self._runner = runner

    def available(self) -> bool:
        """Check whether the kubectl binary is on PATH."""
        return self._runner.which("kubectl") is not None
