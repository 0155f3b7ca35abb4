"""Tier commands: install, summary, cleanup, validate."""

from __future__ import annotations

from typing import Annotated

import typer

from tierctl.cli.context import CLIContext, get_cli_context
from tierctl.cli.shared.console import with_error_handling
from tierctl.installer.common import RunContext
from tierctl.installer.orchestrator import TierOrchestrator, parse_tier_selection
from tierctl.installer.tiers import TIER_CLASSES
from tierctl.runtime.config import FailurePolicy

TierOption = Annotated[
    str,
    typer.Option(
        "--tier",
        "-t",
        help="Tiers to act on: 'all' or a comma-separated list (e.g. 1,3)",
    ),
]


def build_orchestrator(
    cli_ctx: CLIContext, *, fail_fast: bool = False
) -> TierOrchestrator:
    """Wire tiers and a fresh run context from the CLI dependencies."""
    policy = (
        FailurePolicy.FAIL_FAST if fail_fast else cli_ctx.settings.installer.failure_policy
    )
    run = RunContext.create(cli_ctx.console, policy)
    tiers = [
        tier_cls(cli_ctx.commands, cli_ctx.paths, cli_ctx.settings, cli_ctx.console)
        for tier_cls in TIER_CLASSES
    ]
    return TierOrchestrator(tiers, cli_ctx.commands, run, cli_ctx.console)


@with_error_handling
def install(
    ctx: typer.Context,
    tier: TierOption = "all",
    fail_fast: Annotated[
        bool,
        typer.Option(
            "--fail-fast",
            help="Stop at the first failed component instead of continuing",
        ),
    ] = False,
) -> None:
    """Install the selected tiers and verify every component's pods."""
    selection = parse_tier_selection(tier)
    cli_ctx = get_cli_context(ctx)
    exit_code = build_orchestrator(cli_ctx, fail_fast=fail_fast).install(selection)
    if exit_code:
        raise typer.Exit(exit_code)


@with_error_handling
def summary(ctx: typer.Context, tier: TierOption = "all") -> None:
    """Show a per-namespace health rollup for the selected tiers."""
    selection = parse_tier_selection(tier)
    build_orchestrator(get_cli_context(ctx)).summary(selection)


@with_error_handling
def cleanup(
    ctx: typer.Context,
    tier: TierOption = "all",
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt"),
    ] = False,
) -> None:
    """Uninstall the selected tiers (highest tier first) and delete their namespaces."""
    selection = parse_tier_selection(tier)
    cli_ctx = get_cli_context(ctx)

    tiers_label = ", ".join(str(n) for n in selection)
    if not cli_ctx.console.confirm_action(
        f"Remove tier(s) {tiers_label}",
        details="Helm releases, payload objects and namespaces will be deleted.",
        extra_warning="Workloads in those namespaces are deleted with them.",
        force=yes,
    ):
        cli_ctx.console.print("[dim]Cleanup cancelled.[/dim]")
        raise typer.Exit(0)

    build_orchestrator(cli_ctx).cleanup(selection)


@with_error_handling
def validate(ctx: typer.Context, tier: TierOption = "all") -> None:
    """Check the health of the selected tiers; exits 1 when issues are found."""
    selection = parse_tier_selection(tier)
    exit_code = build_orchestrator(get_cli_context(ctx)).validate(selection)
    if exit_code:
        raise typer.Exit(exit_code)
