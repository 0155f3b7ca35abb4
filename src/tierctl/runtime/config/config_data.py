"""Pydantic models for config.yaml.

Every section is optional; an absent section takes the defaults below,
which match the installer's built-in timings.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from tierctl.infra.constants import DEFAULT_CONSTANTS


class FailurePolicy(str, Enum):
    """What a tier does after a component fails."""

    BEST_EFFORT = "best-effort"
    FAIL_FAST = "fail-fast"


# =============================================================================
# Sections
# =============================================================================


class InstallerSettings(BaseModel):
    tools_dir: Path = Field(
        default=Path(DEFAULT_CONSTANTS.TOOLS_DIR),
        description="Directory holding per-component payloads, relative to the project root",
    )
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.BEST_EFFORT,
        description="best-effort records failures and continues; fail-fast stops at the first",
    )
    helm_timeout: str = Field(
        default=DEFAULT_CONSTANTS.HELM_TIMEOUT,
        description="Default Helm --timeout for components that do not set their own",
    )
    stream_helm_output: bool = Field(
        default=True,
        description="Echo helm output line by line while a release installs",
    )


class VerificationSettings(BaseModel):
    """Timings for the post-install pod health check (seconds)."""

    existence_interval: float = Field(default=DEFAULT_CONSTANTS.EXISTENCE_INTERVAL, gt=0)
    existence_timeout: float = Field(default=DEFAULT_CONSTANTS.EXISTENCE_TIMEOUT, ge=0)
    stabilization_interval: float = Field(
        default=DEFAULT_CONSTANTS.STABILIZATION_INTERVAL, gt=0
    )
    stabilization_timeout: float = Field(
        default=DEFAULT_CONSTANTS.STABILIZATION_TIMEOUT, ge=0
    )
    log_tail_lines: int = Field(default=DEFAULT_CONSTANTS.LOG_TAIL_LINES, ge=0)


class CustomObjectWaitSettings(BaseModel):
    """Timings for custom-object readiness waits (seconds)."""

    interval: float = Field(default=DEFAULT_CONSTANTS.CUSTOM_OBJECT_INTERVAL, gt=0)
    timeout: float = Field(default=DEFAULT_CONSTANTS.CUSTOM_OBJECT_TIMEOUT, ge=0)


class KubernetesSettings(BaseModel):
    backend: Literal["kubectl", "kr8s"] = Field(
        default="kubectl",
        description="Cluster query backend",
    )

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value


# =============================================================================
# Root
# =============================================================================


class ConfigData(BaseModel):
    """Validated contents of the ``config:`` key in config.yaml."""

    installer: InstallerSettings = Field(default_factory=InstallerSettings)
    verification: VerificationSettings = Field(default_factory=VerificationSettings)
    custom_object_wait: CustomObjectWaitSettings = Field(
        default_factory=CustomObjectWaitSettings
    )
    kubernetes: KubernetesSettings = Field(default_factory=KubernetesSettings)
