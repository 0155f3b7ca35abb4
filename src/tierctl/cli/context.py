"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer

from tierctl.cli.shared.console import CLIConsole, console
from tierctl.infra.constants import InstallerPaths
from tierctl.infra.k8s import get_k8s_controller
from tierctl.installer.shell_commands import ShellCommands
from tierctl.runtime.config import ConfigData, load_config
from tierctl.utils.paths import get_project_root


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    commands: ShellCommands
    settings: ConfigData
    paths: InstallerPaths


def build_cli_context(config_path: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext.

    Args:
        config_path: config.yaml to load (defaults to the project root's)
    """
    project_root = get_project_root()
    base_paths = InstallerPaths(project_root)

    settings = load_config(
        config_path or base_paths.config_yaml, env_file=base_paths.env_file
    )
    paths = InstallerPaths(project_root, settings.installer.tools_dir)
    controller = get_k8s_controller(settings.kubernetes.backend)

    return CLIContext(
        console=console,
        project_root=project_root,
        commands=ShellCommands(project_root, controller),
        settings=settings,
        paths=paths,
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
