"""Static descriptions of the components each tier installs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tierctl.infra.constants import InstallerPaths


@dataclass(frozen=True)
class ComponentDescriptor:
    """One Helm release managed by a tier.

    Attributes:
        display_name: Name shown to the operator and recorded on failure
        release: Helm release name
        chart: Chart reference (``repo/chart``)
        namespace: Target namespace
        tool: Payload folder under the tools directory, None for no values file
        timeout: Helm ``--timeout`` duration (None = installer.helm_timeout)
        label_selector: Pod selector used by validate (None = whole namespace)
        required: Whether a missing component counts as a validate issue
        verify: Whether pods are verified after install (False for CRD-only charts)
        per_node: Report running pods against the node count (DaemonSets)
        extra_args: Additional helm flags
    """

    display_name: str
    release: str
    chart: str
    namespace: str
    tool: str | None = None
    timeout: str | None = None
    label_selector: str | None = None
    required: bool = True
    verify: bool = True
    per_node: bool = False
    extra_args: tuple[str, ...] = ()

    def values_file(self, paths: InstallerPaths) -> Path | None:
        if self.tool is None:
            return None
        return paths.values_file(self.tool)
