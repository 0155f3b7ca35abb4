"""Exception hierarchy for tierctl."""

from __future__ import annotations


class TierctlError(Exception):
    """Base class for installer failures that reach the operator."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class PrerequisiteError(TierctlError):
    """Raised when a required binary is missing or the cluster is unreachable."""


class HelmInstallError(TierctlError):
    """Raised when ``helm upgrade --install`` exits non-zero."""

    def __init__(self, release: str, namespace: str, details: str | None = None):
        self.release = release
        self.namespace = namespace
        super().__init__(
            f"Helm install of '{release}' into '{namespace}' failed", details
        )


class TierAbortedError(TierctlError):
    """Raised under the fail-fast policy when a component fails."""

    def __init__(self, tier: int, component: str):
        self.tier = tier
        self.component = component
        super().__init__(
            f"Tier {tier} aborted after '{component}' failed (fail-fast policy)"
        )


class ConfigError(TierctlError):
    """Raised when config.yaml cannot be read or validated."""
