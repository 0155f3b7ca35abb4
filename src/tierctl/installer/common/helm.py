"""Helm wrappers shared by every tier."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from tierctl.errors import HelmInstallError
from tierctl.infra.constants import DEFAULT_CONSTANTS
from tierctl.utils.console_like import ConsoleLike, coalesce_console

if TYPE_CHECKING:
    from tierctl.installer.shell_commands import CommandResult, HelmCommands


@dataclass(frozen=True)
class HelmRepository:
    name: str
    url: str


def helm_install(
    helm: HelmCommands,
    release: str,
    chart: str,
    namespace: str,
    config_payload: Path | None = None,
    timeout: str = DEFAULT_CONSTANTS.HELM_TIMEOUT,
    extra_args: Iterable[str] = (),
    on_output: Callable[[str], None] | None = None,
) -> CommandResult:
    """Install or upgrade a release and wait for Helm's readiness gate.

    The values file is passed with ``-f`` only when it exists, so a
    component without local overrides installs with chart defaults.

    Args:
        helm: Helm command wrapper
        release: Release name
        chart: Chart reference (``repo/chart``)
        namespace: Target namespace (created if missing)
        config_payload: Optional values file
        timeout: Helm duration string for ``--timeout``
        extra_args: Additional flags passed through verbatim
        on_output: Called with each output line while helm runs (streams
            the output instead of capturing it)

    Returns:
        The successful CommandResult

    Raises:
        HelmInstallError: When helm exits non-zero
    """
    value_files: list[Path] = []
    if config_payload is not None:
        if config_payload.exists():
            value_files.append(config_payload)
        else:
            logger.debug(f"No values file at {config_payload}, using chart defaults")

    result = helm.upgrade_install(
        release,
        chart,
        namespace,
        value_files=value_files,
        timeout=timeout,
        extra_args=list(extra_args),
        on_output=on_output,
    )
    if not result.success:
        raise HelmInstallError(release, namespace, result.stderr.strip() or None)
    return result


def helm_repo_add(helm: HelmCommands, name: str, url: str) -> bool:
    """Register a chart repository; an existing registration is not an error."""
    result = helm.repo_add(name, url)
    if not result.success:
        logger.debug(f"helm repo add {name} ignored: {result.stderr.strip()}")
    return result.success


def setup_repositories(
    helm: HelmCommands,
    repositories: Iterable[HelmRepository],
    console: ConsoleLike | None = None,
) -> None:
    """Add each repository, then refresh all indexes once."""
    out = coalesce_console(console)
    names = []
    for repo in repositories:
        helm_repo_add(helm, repo.name, repo.url)
        names.append(repo.name)

    result = helm.repo_update()
    if result.success:
        out.ok(f"Helm repositories ready ({', '.join(names)})")
    else:
        out.warn(f"helm repo update failed: {result.stderr.strip()}")
