"""Unit tests for Tier 2 (Observability & Delivery)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tierctl.infra.constants import InstallerPaths
from tierctl.infra.k8s.controller import CustomObjectInfo, PodInfo
from tierctl.installer.common import RunContext
from tierctl.installer.tiers import ObservabilityTier
from tierctl.installer.tiers.tier2_observability import PROMETHEUS_CRDS


@pytest.fixture
def tier(
    mock_commands: MagicMock, tools_paths: InstallerPaths, mock_console: MagicMock
) -> ObservabilityTier:
    return ObservabilityTier(mock_commands, tools_paths, console=mock_console)


def _lines(mock_console: MagicMock) -> list[str]:
    return [c.args[0] for c in mock_console.print.call_args_list if c.args]


class TestInstall:
    """Tests for ObservabilityTier.install."""

    def test_prints_notice_and_installs_nothing(
        self, tier: ObservabilityTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        run = RunContext.create(mock_console)

        tier.install(run)

        mock_commands.helm.upgrade_install.assert_not_called()
        assert run.ledger.failures == ()
        lines = _lines(mock_console)
        assert "[yellow]  Tier 2 tools not yet implemented.[/yellow]" in lines
        assert "[yellow]  Planned: Prometheus Stack, ArgoCD, External Secrets[/yellow]" in lines


class TestValidate:
    """Tests for ObservabilityTier.validate."""

    def test_missing_namespaces_are_not_issues(
        self, tier: ObservabilityTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        mock_commands.kubectl.get_pods.return_value = []

        assert tier.validate() == 0
        warnings = [line for line in _lines(mock_console) if "not deployed" in line]
        assert len(warnings) == 3

    def test_reports_service_monitors_and_secret_store(
        self, tier: ObservabilityTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        mock_commands.kubectl.get_pods.return_value = [PodInfo("p-0", "Running")]

        def objects(resource: str, namespace: str | None = None, *, all_namespaces: bool = False) -> list:
            if resource.startswith("servicemonitors"):
                return [CustomObjectInfo("a"), CustomObjectInfo("b")]
            return [CustomObjectInfo("azure-keyvault", {"Ready": "False"})]

        mock_commands.kubectl.get_custom_objects.side_effect = objects

        assert tier.validate() == 0
        lines = _lines(mock_console)
        assert "    [cyan]ServiceMonitors: 2 registered[/cyan]" in lines
        assert "  [yellow]⚠[/yellow] ClusterSecretStore: status=False" in lines
        assert "  [green]✓[/green] Grafana: running" in lines

    def test_grafana_missing_is_a_warning(
        self, tier: ObservabilityTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        def pods(namespace: str, label_selector: str | None = None) -> list:
            if label_selector == "app.kubernetes.io/name=grafana":
                return [PodInfo("grafana-0", "CrashLoopBackOff")]
            return [PodInfo(f"{namespace}-0", "Running")]

        mock_commands.kubectl.get_pods.side_effect = pods

        assert tier.validate() == 0
        assert "  [yellow]⚠[/yellow] Grafana: not running" in _lines(mock_console)
        mock_commands.kubectl.get_pods.assert_any_call(
            "monitoring", "app.kubernetes.io/name=grafana"
        )


class TestCleanup:
    """Tests for ObservabilityTier.cleanup."""

    def test_cleanup_order(self, tier: ObservabilityTier, mock_commands: MagicMock) -> None:
        tier.cleanup()

        kubectl = mock_commands.kubectl
        kubectl.delete_resources_by_label.assert_called_once_with(
            "configmap", "monitoring", "grafana_dashboard=1"
        )
        assert kubectl.delete_named.call_args_list[0].args == (
            "clustersecretstore",
            ["azure-keyvault"],
        )
        assert kubectl.delete_named.call_args_list[1].args == ("crd", list(PROMETHEUS_CRDS))
        assert [c.args[0] for c in mock_commands.helm.uninstall.call_args_list] == [
            "external-secrets",
            "argocd",
            "kube-prometheus-stack",
        ]
        assert [c.args[0] for c in kubectl.delete_namespace.call_args_list] == [
            "external-secrets",
            "argocd",
            "monitoring",
        ]

    def test_prometheus_crds(self) -> None:
        assert len(PROMETHEUS_CRDS) == 10
        assert "servicemonitors.monitoring.coreos.com" in PROMETHEUS_CRDS


class TestSummary:
    """Tests for the inherited summary."""

    def test_missing_namespaces_are_skipped(
        self, tier: ObservabilityTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        mock_commands.kubectl.get_pods.return_value = []

        tier.summary()

        lines = _lines(mock_console)
        assert lines[0] == "[bold]  Tier 2: Observability & Delivery[/bold]"
        assert sum("SKIP" in line for line in lines) == 3
