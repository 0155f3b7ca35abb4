"""Pod classification and the per-namespace status rollup."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tierctl.infra.constants import DEFAULT_CONSTANTS
from tierctl.infra.k8s.controller import PodInfo
from tierctl.utils.console_like import ConsoleLike, coalesce_console

if TYPE_CHECKING:
    from tierctl.installer.shell_commands import KubectlCommands


class NamespaceBadge(str, Enum):
    OK = DEFAULT_CONSTANTS.BADGE_OK
    FAIL = DEFAULT_CONSTANTS.BADGE_FAIL
    SKIP = DEFAULT_CONSTANTS.BADGE_SKIP


@dataclass(frozen=True)
class PodTally:
    """Pods of one namespace grouped by state.

    Attributes:
        total: Number of pods
        running: Pods whose status is exactly ``Running``
        failing: Pods in a terminal error state
        pending: Pods that are neither settled nor failing
    """

    total: int
    running: int
    failing: tuple[PodInfo, ...]
    pending: tuple[PodInfo, ...]

    @property
    def settled(self) -> bool:
        """True when no pod is failing or still starting."""
        return not self.failing and not self.pending


def tally_pods(pods: Sequence[PodInfo]) -> PodTally:
    failing: list[PodInfo] = []
    pending: list[PodInfo] = []
    running = 0

    for pod in pods:
        if DEFAULT_CONSTANTS.is_error_state(pod.status):
            failing.append(pod)
        elif not DEFAULT_CONSTANTS.is_settled_state(pod.status):
            pending.append(pod)
        if pod.status == "Running":
            running += 1

    return PodTally(
        total=len(pods),
        running=running,
        failing=tuple(failing),
        pending=tuple(pending),
    )


def print_namespace_status(
    kubectl: KubectlCommands,
    namespace: str,
    console: ConsoleLike | None = None,
) -> NamespaceBadge:
    """Print a one-line health rollup for a namespace and return its badge.

    ``FAIL`` when any pod is in an error state, ``SKIP`` when the namespace
    has no pods (or does not exist), ``OK`` otherwise.
    """
    out = coalesce_console(console)
    tally = tally_pods(kubectl.get_pods(namespace))

    if tally.failing:
        out.print(
            f"  [red]{NamespaceBadge.FAIL.value:<5} {namespace}: "
            f"{tally.running}/{tally.total} running, {len(tally.failing)} failed[/red]"
        )
        return NamespaceBadge.FAIL
    if tally.total == 0:
        out.print(f"  [yellow]{NamespaceBadge.SKIP.value:<5} {namespace}: no pods found[/yellow]")
        return NamespaceBadge.SKIP

    out.print(
        f"  [green]{NamespaceBadge.OK.value:<5} {namespace}: "
        f"{tally.running}/{tally.total} pods running[/green]"
    )
    return NamespaceBadge.OK
