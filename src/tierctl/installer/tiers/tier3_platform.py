"""Tier 3: Platform & Registry.

Istio and Crossplane install in phases that must run in order:

    Istio:      istio-base (CRDs) -> istiod (control plane) -> mesh mTLS policy
    Crossplane: core chart -> Provider packages (wait for Healthy) -> ProviderConfig
    Harbor:     single release

A failed phase skips the remaining phases of the same component; the
progress counter still advances so every install reaches 100%.
"""

from __future__ import annotations

from pathlib import Path

from tierctl.installer.common import (
    HealthVerdict,
    HealthVerifier,
    HelmRepository,
    RunContext,
)

from .base import Tier
from .components import ComponentDescriptor

ISTIO_BASE = ComponentDescriptor(
    display_name="Istio Base",
    release="istio-base",
    chart="istio/base",
    namespace="istio-system",
    tool="istio-base",
    timeout="3m",
    verify=False,
    extra_args=("--set", "defaultRevision=default"),
)
ISTIOD = ComponentDescriptor(
    display_name="Istio Control Plane",
    release="istiod",
    chart="istio/istiod",
    namespace="istio-system",
    tool="istiod",
    label_selector="app=istiod",
)
CROSSPLANE = ComponentDescriptor(
    display_name="Crossplane",
    release="crossplane",
    chart="crossplane-stable/crossplane",
    namespace="crossplane-system",
    tool="crossplane",
    label_selector="app=crossplane",
)
HARBOR = ComponentDescriptor(
    display_name="Harbor",
    release="harbor",
    chart="harbor/harbor",
    namespace="harbor",
    tool="harbor",
    timeout="10m",
    label_selector="app=harbor",
    required=False,
)

MESH_POLICY = "Istio Mesh Policy"
PROVIDERS = "Crossplane Providers"
PROVIDER_CONFIG = "Crossplane ProviderConfig"

PROVIDER_RESOURCE = "providers.pkg.crossplane.io"
PROVIDER_CONDITION = "Healthy"


class PlatformTier(Tier):
    number = 3
    title = "Platform & Registry"
    namespaces = ("istio-system", "crossplane-system", "harbor")
    repositories = (
        HelmRepository("istio", "https://istio-release.storage.googleapis.com/charts"),
        HelmRepository("crossplane-stable", "https://charts.crossplane.io/stable"),
        HelmRepository("harbor", "https://helm.goharbor.io"),
    )
    components = (ISTIO_BASE, ISTIOD, CROSSPLANE, HARBOR)

    # repos, istio-base, istiod, mesh policy, crossplane, providers, harbor
    TOTAL_STEPS = 7

    @property
    def mesh_policy_manifest(self) -> Path:
        return self.paths.manifest("istio", "peer-authentication.yaml")

    @property
    def providers_manifest(self) -> Path:
        return self.paths.manifest("crossplane", "providers.yaml")

    @property
    def provider_config_manifest(self) -> Path:
        return self.paths.manifest("crossplane", "provider-config.yaml")

    # =========================================================================
    # Install
    # =========================================================================

    def install(self, run: RunContext) -> None:
        self.print_banner()
        run.progress.set_total_steps(self.TOTAL_STEPS)
        self.setup_repositories(run)

        verifier = self.verifier(run)
        self._install_istio(run, verifier)
        self._install_crossplane(run, verifier)
        self.install_component(run, HARBOR, verifier)
        self.console.print()

    def _install_istio(self, run: RunContext, verifier: HealthVerifier) -> None:
        if self.install_component(run, ISTIO_BASE, verifier) is None:
            self._skip(run, [ISTIOD.display_name, MESH_POLICY], ISTIO_BASE.display_name)
            return

        verdict = self.install_component(run, ISTIOD, verifier)
        if verdict is not HealthVerdict.HEALTHY:
            self._skip(run, [MESH_POLICY], ISTIOD.display_name)
            return

        run.progress.progress("Applying mesh-wide mTLS policy...")
        self.apply_manifest(run, self.mesh_policy_manifest, MESH_POLICY)
        self.console.print()

    def _install_crossplane(self, run: RunContext, verifier: HealthVerifier) -> None:
        verdict = self.install_component(run, CROSSPLANE, verifier)
        if verdict is not HealthVerdict.HEALTHY:
            self._skip(run, [PROVIDERS], CROSSPLANE.display_name)
            return

        run.progress.progress("Installing Crossplane providers...")
        if not self.apply_manifest(run, self.providers_manifest, PROVIDERS):
            return

        verdict = verifier.wait_for_custom_objects(
            PROVIDER_RESOURCE, PROVIDERS, condition=PROVIDER_CONDITION
        )
        if verdict is not HealthVerdict.HEALTHY:
            self.enforce_policy(run, PROVIDERS)
            return

        self.apply_manifest(run, self.provider_config_manifest, PROVIDER_CONFIG)
        self.console.print()

    def _skip(self, run: RunContext, phases: list[str], cause: str) -> None:
        for phase in phases:
            run.progress.progress(f"Skipping {phase} ({cause} failed)")
        self.console.print()

    # =========================================================================
    # Cleanup / Validate
    # =========================================================================

    def cleanup(self) -> None:
        self.console.print("[yellow]Removing Tier 3 platform tools...[/yellow]")
        kubectl = self.commands.kubectl

        self.uninstall_releases([HARBOR])

        self.delete_manifest(self.provider_config_manifest)
        kubectl.delete_all(PROVIDER_RESOURCE)
        self.uninstall_releases([CROSSPLANE])

        self.delete_manifest(self.mesh_policy_manifest)
        self.uninstall_releases([ISTIOD, ISTIO_BASE])

        self.delete_namespaces()
        self.console.ok("Tier 3 tools removed")

    def validate(self) -> int:
        self.console.print(f"Checking {self.heading}...")
        issues = self.check_component(ISTIOD)
        issues += self.check_component(CROSSPLANE)
        self._report_providers()
        issues += self.check_component(HARBOR)
        return issues

    def _report_providers(self) -> None:
        providers = self.commands.kubectl.get_custom_objects(PROVIDER_RESOURCE)
        if not providers:
            self.check_warn(f"{PROVIDERS}: none installed")
            return

        healthy = sum(1 for p in providers if p.condition_true(PROVIDER_CONDITION))
        line = f"{PROVIDERS}: {healthy}/{len(providers)} healthy"
        if healthy == len(providers):
            self.check_ok(line)
        else:
            self.check_warn(line)
