"""Main CLI application module.

Commands:
- install: install tiers in dependency order and verify component health
- summary: per-namespace health rollup
- cleanup: tear tiers down, highest first
- validate: cluster-wide health check with an issue count
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from tierctl.errors import TierctlError

from .commands import cleanup, install, summary, validate
from .context import build_cli_context
from .shared.console import console

# Create the main CLI application
app = typer.Typer(
    help="Tiered installer and health verifier for cluster tooling",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def configure_logging(debug: bool) -> None:
    """Send loguru output to stderr, at DEBUG with --debug and WARNING otherwise."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "WARNING")


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Annotated[
        bool, typer.Option("--debug", help="Log every command and poll tick")
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config.yaml"),
    ] = None,
) -> None:
    configure_logging(debug)
    try:
        ctx.obj = build_cli_context(config)
    except TierctlError as e:
        console.handle_error(e.message, e.details)


app.command()(install)
app.command()(summary)
app.command()(cleanup)
app.command()(validate)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
