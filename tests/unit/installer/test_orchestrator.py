"""Unit tests for tier sequencing and the run tally."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import typer

from tierctl.errors import PrerequisiteError, TierAbortedError
from tierctl.installer.common import RunContext
from tierctl.installer.orchestrator import TierOrchestrator, parse_tier_selection
from tierctl.runtime.config import FailurePolicy


def _tier(number: int, order: MagicMock) -> MagicMock:
    tier = MagicMock()
    tier.number = number
    tier.title = f"Tier {number}"
    tier.validate.return_value = 0
    order.attach_mock(tier, f"tier{number}")
    return tier


@pytest.fixture
def order() -> MagicMock:
    return MagicMock()


@pytest.fixture
def tiers(order: MagicMock) -> list[MagicMock]:
    return [_tier(n, order) for n in (1, 2, 3, 4)]


@pytest.fixture
def run(mock_console: MagicMock) -> RunContext:
    return RunContext.create(mock_console)


@pytest.fixture
def orchestrator(
    tiers: list[MagicMock], mock_commands: MagicMock, run: RunContext, mock_console: MagicMock
) -> TierOrchestrator:
    return TierOrchestrator(tiers, mock_commands, run, mock_console)


def _calls(order: MagicMock, method: str) -> list[str]:
    return [name for name, _, _ in order.mock_calls if name.endswith(f".{method}")]


class TestParseTierSelection:
    """Tests for parse_tier_selection."""

    @pytest.mark.parametrize("value", [None, "", "all", "ALL", " all "])
    def test_all(self, value: str | None) -> None:
        assert parse_tier_selection(value) == (1, 2, 3, 4)

    def test_sorted_and_deduplicated(self) -> None:
        assert parse_tier_selection("3, 1,3") == (1, 3)

    @pytest.mark.parametrize("value", ["5", "0", "one", ",", "1;2"])
    def test_rejects_invalid(self, value: str) -> None:
        with pytest.raises(typer.BadParameter):
            parse_tier_selection(value)


class TestInstall:
    """Tests for TierOrchestrator.install."""

    def test_success_exit_code(
        self, orchestrator: TierOrchestrator, order: MagicMock, mock_console: MagicMock
    ) -> None:
        assert orchestrator.install() == 0

        assert _calls(order, "install") == [
            "tier1.install",
            "tier2.install",
            "tier3.install",
            "tier4.install",
        ]
        assert len(_calls(order, "summary")) == 4
        mock_console.rule.assert_called_with("All tools installed successfully", "green")

    def test_selected_tiers_only(
        self, orchestrator: TierOrchestrator, order: MagicMock, mock_console: MagicMock
    ) -> None:
        orchestrator.install((1, 3))

        assert _calls(order, "install") == ["tier1.install", "tier3.install"]
        mock_console.print.assert_any_call("[bold]  Tiers: 1,3[/bold]")

    def test_failures_produce_exit_code_one(
        self,
        orchestrator: TierOrchestrator,
        tiers: list[MagicMock],
        run: RunContext,
        mock_console: MagicMock,
    ) -> None:
        tiers[0].install.side_effect = lambda r: r.ledger.record_failure("Kyverno")
        tiers[2].install.side_effect = lambda r: r.ledger.record_failure("Harbor")

        assert orchestrator.install() == 1

        mock_console.print.assert_any_call("[red]  Failed: Kyverno, Harbor[/red]")
        mock_console.rule.assert_any_call("INSTALLATION INCOMPLETE", "red")

    def test_fail_fast_abort_stops_later_tiers(
        self,
        tiers: list[MagicMock],
        mock_commands: MagicMock,
        mock_console: MagicMock,
        order: MagicMock,
    ) -> None:
        run = RunContext.create(mock_console, FailurePolicy.FAIL_FAST)

        def abort(r: RunContext) -> None:
            r.ledger.record_failure("Falco")
            raise TierAbortedError(1, "Falco")

        tiers[0].install.side_effect = abort
        orchestrator = TierOrchestrator(tiers, mock_commands, run, mock_console)

        assert orchestrator.install() == 1

        assert _calls(order, "install") == ["tier1.install"]
        assert len(_calls(order, "summary")) == 4
        mock_console.error.assert_called_once()

    def test_prerequisite_failure_installs_nothing(
        self, orchestrator: TierOrchestrator, mock_commands: MagicMock, order: MagicMock
    ) -> None:
        mock_commands.helm.available.return_value = False

        with pytest.raises(PrerequisiteError):
            orchestrator.install()

        assert _calls(order, "install") == []


class TestCleanupAndSummary:
    """Tests for cleanup and summary sequencing."""

    def test_cleanup_runs_highest_tier_first(
        self, orchestrator: TierOrchestrator, order: MagicMock
    ) -> None:
        orchestrator.cleanup((1, 2, 4))

        assert _calls(order, "cleanup") == ["tier4.cleanup", "tier2.cleanup", "tier1.cleanup"]

    def test_summary_in_tier_order(self, orchestrator: TierOrchestrator, order: MagicMock) -> None:
        orchestrator.summary((3, 1))

        assert _calls(order, "summary") == ["tier1.summary", "tier3.summary"]


class TestValidate:
    """Tests for TierOrchestrator.validate."""

    def test_unreachable_cluster(
        self, orchestrator: TierOrchestrator, mock_commands: MagicMock, order: MagicMock
    ) -> None:
        mock_commands.kubectl.cluster_reachable.return_value = False

        assert orchestrator.validate() == 1
        assert _calls(order, "validate") == []

    def test_sums_issues(self, orchestrator: TierOrchestrator, tiers: list[MagicMock]) -> None:
        tiers[0].validate.return_value = 2
        tiers[2].validate.return_value = 1

        assert orchestrator.validate() == 1

    def test_all_checks_passed(self, orchestrator: TierOrchestrator, order: MagicMock) -> None:
        assert orchestrator.validate() == 0
        assert len(_calls(order, "validate")) == 4
