"""Helm command abstractions.

This module provides commands for Helm release management: repository
setup, idempotent installs and uninstalls.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Repository management (add, update)
    - Release management (upgrade --install, uninstall)
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def available(self) -> bool:
        """Check whether the helm binary is on PATH."""
        return self._runner.which("helm") is not None

    # =========================================================================
    # Repositories
    # =========================================================================

    def repo_add(self, name: str, url: str) -> CommandResult:
        """Register a chart repository."""
        return self._runner.run(["helm", "repo", "add", name, url])

    def repo_update(self) -> CommandResult:
        """Refresh the local index of every registered repository."""
        return self._runner.run(["helm", "repo", "update"])

    # =========================================================================
    # Release Management
    # =========================================================================

    def upgrade_install(
        self,
        release_name: str,
        chart: str | Path,
        namespace: str,
        *,
        value_files: list[Path] | None = None,
        timeout: str = "5m",
        wait: bool = True,
        create_namespace: bool = True,
        extra_args: list[str] | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Deploy or upgrade a Helm release.

        Uses `helm upgrade --install` to idempotently deploy a chart.
        If the release doesn't exist, it will be installed. If it exists,
        it will be upgraded.

        Args:
            release_name: Name for the Helm release (e.g., "falco")
            chart: Chart reference ("repo/chart") or path to a chart directory
            namespace: Kubernetes namespace for deployment
            value_files: Optional list of values.yaml override files
            timeout: Maximum time to wait for deployment
            wait: Whether to wait for resources to be ready
            create_namespace: Whether to create namespace if it doesn't exist
            extra_args: Additional flags appended verbatim
            on_output: Optional callback for real-time output streaming.
                       When set, stderr is merged into stdout.

        Returns:
            CommandResult with deployment status

        Example:
            >>> helm.upgrade_install(
            ...     "kyverno",
            ...     "kyverno/kyverno",
            ...     "kyverno",
            ...     value_files=[Path("tools/kyverno/values.yaml")],
            ... )
        """
        cmd = [
            "helm",
            "upgrade",
            "--install",
            release_name,
            str(chart),
            "--namespace",
            namespace,
        ]

        if create_namespace:
            cmd.append("--create-namespace")
        if wait:
            cmd.append("--wait")
        cmd.extend(["--timeout", timeout])

        for vf in value_files or []:
            cmd.extend(["-f", str(vf)])

        cmd.extend(extra_args or [])

        if on_output:
            return self._runner.run_streaming(cmd, on_output=on_output)
        return self._runner.run(cmd)

    def uninstall(
        self,
        release_name: str,
        namespace: str,
        *,
        wait: bool = True,
    ) -> CommandResult:
        """Uninstall a Helm release.

        Args:
            release_name: Name of the release to uninstall
            namespace: Kubernetes namespace
            wait: Whether to wait for resources to be deleted

        Returns:
            CommandResult with uninstall status
        """
        cmd = ["helm", "uninstall", release_name, "-n", namespace]
        if wait:
            cmd.append("--wait")
        return self._runner.run(cmd)
