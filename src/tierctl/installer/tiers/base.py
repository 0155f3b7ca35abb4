"""Base class shared by all installation tiers."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from loguru import logger
from rich.markup import escape

from tierctl.errors import HelmInstallError, TierAbortedError
from tierctl.infra.constants import InstallerPaths
from tierctl.installer.common import (
    HealthVerdict,
    HealthVerifier,
    HelmRepository,
    RunContext,
    helm_install,
    print_namespace_status,
    setup_repositories,
)
from tierctl.runtime.config import ConfigData
from tierctl.utils.console_like import ConsoleLike, coalesce_console

from .components import ComponentDescriptor

if TYPE_CHECKING:
    from tierctl.installer.shell_commands import ShellCommands


class Tier(ABC):
    """A dependency-ordered group of components.

    Subclasses declare their components, repositories and namespaces as
    class attributes and implement the four operations. Helpers here hold
    the behavior every tier shares: installing and verifying a component,
    applying the failure policy, uninstalling releases and checking pods
    during validation.

    Namespaces are advisory ownership: no two tiers list the same one.
    """

    number: ClassVar[int]
    title: ClassVar[str]
    namespaces: ClassVar[tuple[str, ...]] = ()
    repositories: ClassVar[tuple[HelmRepository, ...]] = ()
    components: ClassVar[tuple[ComponentDescriptor, ...]] = ()

    def __init__(
        self,
        commands: ShellCommands,
        paths: InstallerPaths,
        settings: ConfigData | None = None,
        console: ConsoleLike | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the tier.

        Args:
            commands: Helm and kubectl command wrappers
            paths: Resolver for payload files under the tools directory
            settings: Loaded configuration (defaults when None)
            console: Output console
            sleep: Sleep function used by every wait (injectable for tests)
            clock: Monotonic clock used by every wait (injectable for tests)
        """
        self.commands = commands
        self.paths = paths
        self.settings = settings or ConfigData()
        self.console = coalesce_console(console)
        self._sleep = sleep
        self._clock = clock

    @property
    def heading(self) -> str:
        return f"Tier {self.number}: {self.title}"

    # =========================================================================
    # Operations
    # =========================================================================

    @abstractmethod
    def install(self, run: RunContext) -> None:
        """Install the tier's components, recording failures in ``run``."""

    def summary(self) -> None:
        """Print the status rollup of each of the tier's namespaces."""
        self.console.print(f"[bold]  {self.heading}[/bold]")
        for namespace in self.namespaces:
            print_namespace_status(self.commands.kubectl, namespace, self.console)

    @abstractmethod
    def cleanup(self) -> None:
        """Remove everything the tier installs. Never raises for absent objects."""

    @abstractmethod
    def validate(self) -> int:
        """Check the tier's health and return the number of issues found."""

    # =========================================================================
    # Install helpers
    # =========================================================================

    def print_banner(self) -> None:
        self.console.print(f"\n[bold]── {self.heading} ──[/bold]\n")

    def print_not_implemented(self) -> None:
        """Notice printed by tiers whose install is not available yet."""
        planned = ", ".join(c.display_name for c in self.components)
        self.console.print(f"[yellow]  Tier {self.number} tools not yet implemented.[/yellow]")
        if planned:
            self.console.print(f"[yellow]  Planned: {planned}[/yellow]")

    def verifier(self, run: RunContext) -> HealthVerifier:
        return HealthVerifier(
            self.commands.kubectl,
            run.ledger,
            settings=self.settings.verification,
            object_wait=self.settings.custom_object_wait,
            console=self.console,
            sleep=self._sleep,
            clock=self._clock,
        )

    def setup_repositories(self, run: RunContext) -> None:
        run.progress.progress("Setting up Helm repositories...")
        setup_repositories(self.commands.helm, self.repositories, self.console)

    def install_component(
        self,
        run: RunContext,
        component: ComponentDescriptor,
        verifier: HealthVerifier,
        *,
        label: str | None = None,
    ) -> HealthVerdict | None:
        """Advance progress, install one release and verify its pods.

        Returns:
            The verification verdict, HEALTHY for components that are not
            verified, or None when the Helm install itself failed

        Raises:
            TierAbortedError: Under the fail-fast policy, when the component fails
        """
        run.progress.progress(label or f"Installing {component.display_name}...")

        if not self.helm_install(run, component):
            return None
        if not component.verify:
            self.console.ok(f"{component.display_name} installed")
            return HealthVerdict.HEALTHY

        verdict = verifier.verify_install(component.namespace, component.display_name)
        if verdict is not HealthVerdict.HEALTHY:
            self.enforce_policy(run, component.display_name)
        return verdict

    def helm_install(self, run: RunContext, component: ComponentDescriptor) -> bool:
        """Run the Helm install for a component; record and report a failure."""
        installer = self.settings.installer
        try:
            helm_install(
                self.commands.helm,
                component.release,
                component.chart,
                component.namespace,
                component.values_file(self.paths),
                timeout=component.timeout or installer.helm_timeout,
                extra_args=component.extra_args,
                on_output=self._print_helm_output if installer.stream_helm_output else None,
            )
        except HelmInstallError as e:
            self.console.error(f"{component.display_name}: {e.message}")
            if e.details:
                self.console.print(f"[dim]{escape(e.details)}[/dim]")
            run.ledger.record_failure(component.display_name)
            self.enforce_policy(run, component.display_name)
            return False
        return True

    def _print_helm_output(self, line: str) -> None:
        line = line.strip()
        # Chart values warnings about table coercion are noise
        if not line or ("warning:" in line.lower() and "table" in line.lower()):
            return
        self.console.print(f"  [dim]{escape(line)}[/dim]")

    def apply_manifest(self, run: RunContext, manifest: Path, display_name: str) -> bool | None:
        """Apply a payload manifest.

        Returns:
            True when applied, False when kubectl failed (recorded), None
            when the manifest file does not exist (warned and skipped)
        """
        if not manifest.exists():
            self.console.warn(f"{display_name}: manifest not found at {manifest}, skipping")
            return None

        result = self.commands.kubectl.apply_manifest(manifest)
        if result.success:
            self.console.ok(f"{display_name} applied ({manifest.name})")
            return True

        self.console.error(f"{display_name}: kubectl apply failed")
        if result.stderr.strip():
            self.console.print(f"[dim]{escape(result.stderr.strip())}[/dim]")
        run.ledger.record_failure(display_name)
        self.enforce_policy(run, display_name)
        return False

    def enforce_policy(self, run: RunContext, display_name: str) -> None:
        if run.fail_fast:
            raise TierAbortedError(self.number, display_name)

    # =========================================================================
    # Cleanup helpers
    # =========================================================================

    def uninstall_releases(self, components: Iterable[ComponentDescriptor]) -> None:
        for component in components:
            result = self.commands.helm.uninstall(component.release, component.namespace)
            if result.success:
                self.console.info(f"Uninstalled {component.release} from {component.namespace}")
            else:
                logger.debug(
                    f"Uninstall of {component.release} ignored: {result.stderr.strip()}"
                )

    def delete_manifest(self, manifest: Path) -> None:
        if not manifest.exists():
            return
        result = self.commands.kubectl.delete_manifest(manifest)
        if not result.success:
            logger.debug(f"Delete of {manifest} ignored: {result.stderr.strip()}")

    def delete_namespaces(self) -> None:
        for namespace in reversed(self.namespaces):
            result = self.commands.kubectl.delete_namespace(namespace)
            if not result.success:
                logger.debug(f"Namespace {namespace} delete ignored: {result.stderr.strip()}")

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def count_running(self, namespace: str, label_selector: str | None = None) -> int:
        pods = self.commands.kubectl.get_pods(namespace, label_selector)
        return sum(1 for pod in pods if pod.status == "Running")

    def check_component(self, component: ComponentDescriptor) -> int:
        """Print one validate line for a component; return 1 if it is an issue."""
        running = self.count_running(component.namespace, component.label_selector)
        name = component.display_name

        if running > 0:
            if component.per_node:
                nodes = self.commands.kubectl.count_nodes()
                self.check_ok(f"{name}: {running}/{nodes} nodes covered")
            else:
                self.check_ok(f"{name}: {running} pods running")
            return 0

        if component.required:
            self.check_fail(f"{name}: not running")
            return 1
        self.check_warn(f"{name}: not running")
        return 0

    def check_ok(self, msg: str) -> None:
        self.console.print(f"  [green]✓[/green] {msg}")

    def check_warn(self, msg: str) -> None:
        self.console.print(f"  [yellow]⚠[/yellow] {msg}")

    def check_fail(self, msg: str) -> None:
        self.console.print(f"  [red]✗[/red] {msg}")

    def check_note(self, msg: str) -> None:
        self.console.print(f"    [cyan]{msg}[/cyan]")
