"""Tier 4: Cloud-Managed autoscaling.

Karpenter node autoprovisioning is enabled through the cloud provider, not
Helm, so install is not available here yet. The controller runs in
kube-system; this tier only inspects and removes the NodePool and
AKSNodeClass objects.
"""

from __future__ import annotations

from loguru import logger

from tierctl.installer.common import RunContext

from .base import Tier
from .components import ComponentDescriptor

KARPENTER = ComponentDescriptor(
    display_name="Karpenter",
    release="karpenter",
    chart="",
    namespace="kube-system",
    label_selector="app.kubernetes.io/name=karpenter",
    required=False,
)

KARPENTER_CRD = "nodepools.karpenter.sh"
NODEPOOLS = "nodepools"
NODECLASSES = "aksnodeclasses"


class ManagedTier(Tier):
    number = 4
    title = "Cloud-Managed"
    # kube-system belongs to the cluster, not to this tier
    namespaces = ()
    components = (KARPENTER,)

    def karpenter_available(self) -> bool:
        return self.commands.kubectl.crd_exists(KARPENTER_CRD)

    def install(self, run: RunContext) -> None:
        self.print_banner()
        self.print_not_implemented()
        self.console.print()

    def summary(self) -> None:
        self.console.print(f"[bold]  {self.heading}[/bold]")

        if not self.karpenter_available():
            self.console.print(
                "  [yellow]SKIP  Karpenter: not enabled (run install --tier 4)[/yellow]"
            )
            return

        pools = self.commands.kubectl.get_custom_objects(NODEPOOLS)
        if not pools:
            self.console.print(
                "  [yellow]SKIP  Karpenter: CRDs present but no NodePools applied[/yellow]"
            )
            return

        self.console.print(f"  [green]OK    Karpenter: {len(pools)} NodePool(s)[/green]")
        for pool in pools:
            self.console.print(f"  [green]      - {pool.name}[/green]")

    def cleanup(self) -> None:
        self.console.print("[yellow]Removing Tier 4 managed resources...[/yellow]")

        if not self.karpenter_available():
            self.console.info("Karpenter not enabled, nothing to clean up")
            return

        for resource in (NODEPOOLS, NODECLASSES):
            result = self.commands.kubectl.delete_all(resource)
            if not result.success:
                logger.debug(f"Delete of {resource} ignored: {result.stderr.strip()}")

        self.console.ok("Karpenter NodePools and AKSNodeClasses removed")
        self.console.info(
            "The Karpenter controller itself is managed by the cloud provider and remains"
        )

    def validate(self) -> int:
        """Report Karpenter state. Nothing here is ever counted as an issue."""
        self.console.print(f"Checking {self.heading}...")
        kubectl = self.commands.kubectl

        if not self.karpenter_available():
            self.check_warn("Karpenter: not enabled (run install --tier 4 to enable)")
            return 0

        running = self.count_running(KARPENTER.namespace, KARPENTER.label_selector)
        if running:
            self.check_ok(f"Karpenter controller: {running} pod(s) running")
        else:
            self.check_warn("Karpenter controller: not found in kube-system")

        pools = kubectl.get_custom_objects(NODEPOOLS)
        if pools:
            self.check_ok(f"NodePools: {len(pools)} configured")
            for pool in pools:
                self.check_note(f"{pool.name} (ready: {pool.conditions.get('Ready', 'Unknown')})")
        else:
            self.check_warn("NodePools: none applied")

        classes = kubectl.get_custom_objects(NODECLASSES)
        if classes:
            self.check_ok(f"AKSNodeClasses: {len(classes)} configured")
        return 0
