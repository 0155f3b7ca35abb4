"""Tier 1: Security Core.

Install order:
    Falco -> Falcosidekick -> Falco Talon   (dependency chain, namespace falco)
    Kyverno, Trivy Operator, Kubescape       (independent)

The security controls go in first because the higher tiers rely on them
(policy enforcement on deployments, ServiceMonitor targets).
"""

from __future__ import annotations

from tierctl.installer.common import HelmRepository, RunContext

from .base import Tier
from .components import ComponentDescriptor

FALCO = ComponentDescriptor(
    display_name="Falco",
    release="falco",
    chart="falcosecurity/falco",
    namespace="falco",
    tool="falco",
    timeout="5m",
    label_selector="app.kubernetes.io/name=falco",
    per_node=True,
)
FALCOSIDEKICK = ComponentDescriptor(
    display_name="Falcosidekick",
    release="falcosidekick",
    chart="falcosecurity/falcosidekick",
    namespace="falco",
    tool="falcosidekick",
    timeout="3m",
    label_selector="app.kubernetes.io/name=falcosidekick",
    required=False,
)
FALCO_TALON = ComponentDescriptor(
    display_name="Falco Talon",
    release="falco-talon",
    chart="falcosecurity/falco-talon",
    namespace="falco",
    tool="falco-talon",
    timeout="3m",
    label_selector="app.kubernetes.io/name=falco-talon",
    required=False,
)
KYVERNO = ComponentDescriptor(
    display_name="Kyverno",
    release="kyverno",
    chart="kyverno/kyverno",
    namespace="kyverno",
    tool="kyverno",
)
TRIVY = ComponentDescriptor(
    display_name="Trivy Operator",
    release="trivy-operator",
    chart="aqua/trivy-operator",
    namespace="trivy-system",
    tool="trivy",
)
KUBESCAPE = ComponentDescriptor(
    display_name="Kubescape",
    release="kubescape",
    chart="kubescape/kubescape-operator",
    namespace="kubescape",
    tool="kubescape",
    required=False,
)


class SecurityCoreTier(Tier):
    number = 1
    title = "Security Core"
    namespaces = ("falco", "kyverno", "trivy-system", "kubescape")
    repositories = (
        HelmRepository("falcosecurity", "https://falcosecurity.github.io/charts"),
        HelmRepository("kyverno", "https://kyverno.github.io/kyverno/"),
        HelmRepository("aqua", "https://aquasecurity.github.io/helm-charts/"),
        HelmRepository("kubescape", "https://kubescape.github.io/helm-charts/"),
    )
    components = (FALCO, FALCOSIDEKICK, FALCO_TALON, KYVERNO, TRIVY, KUBESCAPE)

    def install(self, run: RunContext) -> None:
        self.print_banner()
        # repository setup + one step per component
        run.progress.set_total_steps(len(self.components) + 1)
        self.setup_repositories(run)

        verifier = self.verifier(run)
        for component in self.components:
            self.install_component(run, component, verifier)
            self.console.print()

    def cleanup(self) -> None:
        self.console.print("[yellow]Removing Tier 1 security tools...[/yellow]")
        self.uninstall_releases(reversed(self.components))
        self.delete_namespaces()
        self.console.ok("Tier 1 security tools removed")

    def validate(self) -> int:
        self.console.print(f"Checking {self.heading}...")
        return sum(self.check_component(component) for component in self.components)
