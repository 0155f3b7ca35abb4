"""Runtime configuration for tierctl."""

from .config_data import (
    ConfigData,
    CustomObjectWaitSettings,
    FailurePolicy,
    InstallerSettings,
    KubernetesSettings,
    VerificationSettings,
)
from .config_loader import load_config

__all__ = [
    "ConfigData",
    "CustomObjectWaitSettings",
    "FailurePolicy",
    "InstallerSettings",
    "KubernetesSettings",
    "VerificationSettings",
    "load_config",
]
