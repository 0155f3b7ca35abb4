"""Sequencing of tiers for install, summary, cleanup and validate."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import typer
from loguru import logger
from rich.panel import Panel

from tierctl.errors import TierAbortedError
from tierctl.installer.common import RunContext, check_prerequisites
from tierctl.installer.tiers import Tier
from tierctl.utils.console_like import ConsoleLike, coalesce_console

if TYPE_CHECKING:
    from tierctl.installer.shell_commands import ShellCommands

ALL_TIERS: tuple[int, ...] = (1, 2, 3, 4)

TROUBLESHOOTING = (
    "Troubleshooting:\n"
    "  Check pod logs:  kubectl logs -n <namespace> <pod-name>\n"
    "  Check events:    kubectl get events -n <namespace> --sort-by=.lastTimestamp"
)
NEXT_STEPS = (
    "Next steps:\n"
    "  Review health:    tierctl summary\n"
    "  Validate install: tierctl validate"
)


def parse_tier_selection(value: str | None) -> tuple[int, ...]:
    """Parse ``all`` or a comma-separated list of tier numbers.

    The result is always in dependency order without duplicates, whatever
    order the tiers were given in.

    Raises:
        typer.BadParameter: For anything other than known tier numbers
    """
    if value is None or value.strip().lower() in ("", "all"):
        return ALL_TIERS

    selected: set[int] = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            number = int(part)
        except ValueError:
            raise typer.BadParameter(
                f"'{part}' is not a tier number (choose from 1-4 or 'all')"
            ) from None
        if number not in ALL_TIERS:
            raise typer.BadParameter(f"Unknown tier {number} (choose from 1-4 or 'all')")
        selected.add(number)

    if not selected:
        raise typer.BadParameter("No tiers selected")
    return tuple(sorted(selected))


class TierOrchestrator:
    """Runs tiers one after another and reports the run's outcome.

    Attributes:
        tiers: Tier instances keyed by tier number
        commands: Shell commands, used for the prerequisite check
        run: State shared by every tier of this invocation
    """

    def __init__(
        self,
        tiers: Iterable[Tier],
        commands: ShellCommands,
        run: RunContext,
        console: ConsoleLike | None = None,
    ) -> None:
        self.tiers = {tier.number: tier for tier in tiers}
        self.commands = commands
        self.run = run
        self.console = coalesce_console(console)

    def _select(self, selection: Sequence[int], *, reverse: bool = False) -> list[Tier]:
        numbers = sorted(n for n in selection if n in self.tiers)
        if reverse:
            numbers.reverse()
        return [self.tiers[n] for n in numbers]

    # =========================================================================
    # Install
    # =========================================================================

    def install(self, selection: Sequence[int] = ALL_TIERS) -> int:
        """Install the selected tiers and return the process exit code.

        Under best-effort every selected tier runs. Under fail-fast the
        first failure stops the sequence; the summary and tally still print.
        """
        tiers = self._select(selection)
        self.console.rule("Installing tiered tool stack")
        if tuple(selection) != ALL_TIERS:
            self.console.print(f"[bold]  Tiers: {','.join(str(t.number) for t in tiers)}[/bold]")
        self.console.print()

        check_prerequisites(self.commands, self.console)
        self.console.print()

        for tier in tiers:
            logger.debug(f"Installing tier {tier.number} ({tier.title})")
            try:
                tier.install(self.run)
            except TierAbortedError as e:
                self.console.error(e.message)
                break

        self.console.print()
        self.console.rule("Installation Summary")
        self.console.print()
        for tier in tiers:
            tier.summary()
            self.console.print()

        return self._print_tally()

    def _print_tally(self) -> int:
        ledger = self.run.ledger
        if ledger.has_failures:
            self.console.rule("INSTALLATION INCOMPLETE", "red")
            self.console.print(f"[red]  Failed: {', '.join(ledger.failures)}[/red]")
            self.console.print()
            self.console.print(TROUBLESHOOTING)
            return 1

        self.console.rule("All tools installed successfully", "green")
        self.console.print()
        self.console.print(NEXT_STEPS)
        return 0

    # =========================================================================
    # Summary / Cleanup / Validate
    # =========================================================================

    def summary(self, selection: Sequence[int] = ALL_TIERS) -> None:
        for tier in self._select(selection):
            tier.summary()
            self.console.print()

    def cleanup(self, selection: Sequence[int] = ALL_TIERS) -> None:
        """Tear down the selected tiers, highest tier first."""
        for tier in self._select(selection, reverse=True):
            logger.debug(f"Cleaning up tier {tier.number} ({tier.title})")
            tier.cleanup()
            self.console.print()

    def validate(self, selection: Sequence[int] = ALL_TIERS) -> int:
        """Validate the selected tiers and return the process exit code."""
        kubectl = self.commands.kubectl
        self.console.print("Checking cluster connection...")
        if not kubectl.cluster_reachable():
            self.console.print("  [red]✗[/red] Not connected to a cluster")
            return 1
        self.console.print(f"  [green]✓[/green] Connected to: {kubectl.get_current_context()}")

        issues = 0
        for tier in self._select(selection):
            self.console.print("\n───────────────────────────────────────")
            issues += tier.validate()

        self.console.print()
        if issues:
            self.console.print(
                Panel(
                    f"[bold red]{issues} issue(s) found[/bold red]",
                    title="Validation Summary",
                    border_style="red",
                )
            )
            return 1

        self.console.print(
            Panel(
                "[bold green]All checks passed[/bold green]",
                title="Validation Summary",
                border_style="green",
            )
        )
        return 0
