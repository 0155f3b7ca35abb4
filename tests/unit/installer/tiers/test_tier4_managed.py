"""Unit tests for Tier 4 (Cloud-Managed)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tierctl.infra.constants import InstallerPaths
from tierctl.infra.k8s.controller import CustomObjectInfo
from tierctl.installer.common import RunContext
from tierctl.installer.tiers import ManagedTier
from tierctl.installer.tiers.tier4_managed import KARPENTER_CRD


@pytest.fixture
def tier(
    mock_commands: MagicMock, tools_paths: InstallerPaths, mock_console: MagicMock
) -> ManagedTier:
    return ManagedTier(mock_commands, tools_paths, console=mock_console)


def _lines(mock_console: MagicMock) -> list[str]:
    return [c.args[0] for c in mock_console.print.call_args_list if c.args]


class TestWithoutKarpenter:
    """Karpenter CRDs absent."""

    def test_install_is_a_notice(
        self, tier: ManagedTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        run = RunContext.create(mock_console)

        tier.install(run)

        mock_commands.helm.upgrade_install.assert_not_called()
        assert "[yellow]  Tier 4 tools not yet implemented.[/yellow]" in _lines(mock_console)

    def test_summary_skips(self, tier: ManagedTier, mock_console: MagicMock) -> None:
        tier.summary()

        assert any("SKIP  Karpenter: not enabled" in line for line in _lines(mock_console))

    def test_validate_is_not_an_issue(self, tier: ManagedTier, mock_commands: MagicMock) -> None:
        assert tier.validate() == 0
        mock_commands.kubectl.crd_exists.assert_called_with(KARPENTER_CRD)

    def test_cleanup_deletes_nothing(self, tier: ManagedTier, mock_commands: MagicMock) -> None:
        tier.cleanup()

        mock_commands.kubectl.delete_all.assert_not_called()
        mock_commands.kubectl.delete_namespace.assert_not_called()


class TestWithKarpenter:
    """Karpenter CRDs present."""

    @pytest.fixture(autouse=True)
    def _karpenter(self, mock_commands: MagicMock) -> None:
        mock_commands.kubectl.crd_exists.return_value = True

    def test_summary_lists_nodepools(
        self, tier: ManagedTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        mock_commands.kubectl.get_custom_objects.return_value = [
            CustomObjectInfo("default"),
            CustomObjectInfo("gpu"),
        ]

        tier.summary()

        lines = _lines(mock_console)
        assert "  [green]OK    Karpenter: 2 NodePool(s)[/green]" in lines
        assert "  [green]      - gpu[/green]" in lines

    def test_summary_without_nodepools(self, tier: ManagedTier, mock_console: MagicMock) -> None:
        tier.summary()

        assert any("no NodePools applied" in line for line in _lines(mock_console))

    def test_cleanup_removes_pools_and_classes(
        self, tier: ManagedTier, mock_commands: MagicMock
    ) -> None:
        tier.cleanup()

        assert [c.args[0] for c in mock_commands.kubectl.delete_all.call_args_list] == [
            "nodepools",
            "aksnodeclasses",
        ]

    def test_validate_reports_without_issues(
        self, tier: ManagedTier, mock_commands: MagicMock, mock_console: MagicMock
    ) -> None:
        mock_commands.kubectl.get_pods.return_value = []
        mock_commands.kubectl.get_custom_objects.return_value = [
            CustomObjectInfo("default", {"Ready": "True"})
        ]

        assert tier.validate() == 0
        lines = _lines(mock_console)
        assert "  [yellow]⚠[/yellow] Karpenter controller: not found in kube-system" in lines
        assert "    [cyan]default (ready: True)[/cyan]" in lines
