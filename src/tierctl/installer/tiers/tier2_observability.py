"""Tier 2: Observability & Delivery.

Install is not available yet. Summary, validate and cleanup work against
whatever is already deployed, so a cluster set up by hand can still be
inspected and torn down.
"""

from __future__ import annotations

from loguru import logger

from tierctl.installer.common import HelmRepository, RunContext

from .base import Tier
from .components import ComponentDescriptor

PROMETHEUS_STACK = ComponentDescriptor(
    display_name="Prometheus Stack",
    release="kube-prometheus-stack",
    chart="prometheus-community/kube-prometheus-stack",
    namespace="monitoring",
    tool="prometheus",
    timeout="8m",
    label_selector="app.kubernetes.io/instance=kube-prometheus-stack",
)
ARGOCD = ComponentDescriptor(
    display_name="ArgoCD",
    release="argocd",
    chart="argo/argo-cd",
    namespace="argocd",
    tool="argocd",
)
EXTERNAL_SECRETS = ComponentDescriptor(
    display_name="External Secrets",
    release="external-secrets",
    chart="external-secrets/external-secrets",
    namespace="external-secrets",
    tool="external-secrets",
)

CLUSTER_SECRET_STORE = "azure-keyvault"
GRAFANA_SELECTOR = "app.kubernetes.io/name=grafana"
DASHBOARD_LABEL = "grafana_dashboard=1"

# Left behind by the kube-prometheus-stack chart on uninstall
PROMETHEUS_CRDS = tuple(
    f"{kind}.monitoring.coreos.com"
    for kind in (
        "alertmanagerconfigs",
        "alertmanagers",
        "podmonitors",
        "probes",
        "prometheusagents",
        "prometheuses",
        "prometheusrules",
        "scrapeconfigs",
        "servicemonitors",
        "thanosrulers",
    )
)


class ObservabilityTier(Tier):
    number = 2
    title = "Observability & Delivery"
    namespaces = ("monitoring", "argocd", "external-secrets")
    repositories = (
        HelmRepository(
            "prometheus-community", "https://prometheus-community.github.io/helm-charts"
        ),
        HelmRepository("argo", "https://argoproj.github.io/argo-helm"),
        HelmRepository("external-secrets", "https://charts.external-secrets.io"),
    )
    components = (PROMETHEUS_STACK, ARGOCD, EXTERNAL_SECRETS)

    def install(self, run: RunContext) -> None:
        self.print_banner()
        self.print_not_implemented()
        self.console.print()

    def cleanup(self) -> None:
        self.console.print("[yellow]Removing Tier 2 observability tools...[/yellow]")
        kubectl = self.commands.kubectl

        # ClusterSecretStore first, while the ESO CRDs still exist
        kubectl.delete_named("clustersecretstore", [CLUSTER_SECRET_STORE])
        kubectl.delete_resources_by_label(
            "configmap", PROMETHEUS_STACK.namespace, DASHBOARD_LABEL
        )

        self.uninstall_releases(reversed(self.components))

        result = kubectl.delete_named("crd", list(PROMETHEUS_CRDS))
        if not result.success:
            logger.debug(f"Prometheus CRD delete ignored: {result.stderr.strip()}")

        self.delete_namespaces()
        self.console.ok("Tier 2 tools removed")

    def validate(self) -> int:
        """Report what is deployed. Absent components are never issues."""
        self.console.print(f"Checking {self.heading}...")
        kubectl = self.commands.kubectl

        for component in self.components:
            running = self.count_running(component.namespace, component.label_selector)
            if running == 0:
                self.check_warn(f"{component.display_name}: not deployed")
                continue

            self.check_ok(f"{component.display_name}: {running} pods running")
            if component is PROMETHEUS_STACK:
                if self.count_running(PROMETHEUS_STACK.namespace, GRAFANA_SELECTOR):
                    self.check_ok("Grafana: running")
                else:
                    self.check_warn("Grafana: not running")
                monitors = kubectl.get_custom_objects(
                    "servicemonitors.monitoring.coreos.com", all_namespaces=True
                )
                self.check_note(f"ServiceMonitors: {len(monitors)} registered")
            elif component is EXTERNAL_SECRETS:
                self._check_secret_store()

        return 0

    def _check_secret_store(self) -> None:
        stores = {
            obj.name: obj
            for obj in self.commands.kubectl.get_custom_objects("clustersecretstores")
        }
        store = stores.get(CLUSTER_SECRET_STORE)
        if store is None:
            return
        if store.condition_true("Ready"):
            self.check_ok("ClusterSecretStore: Ready")
        else:
            status = store.conditions.get("Ready", "Unknown")
            self.check_warn(f"ClusterSecretStore: status={status}")
