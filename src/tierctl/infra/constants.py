"""Installer constants and paths.

This module centralizes the magic strings, paths, and default timings
used throughout the installation process.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InstallerConstants:
    """Constants for tiered Helm installation.

    All attributes are class-level and immutable.
    """

    # Helm defaults
    HELM_TIMEOUT: str = "5m"

    # Pod health verification (seconds)
    EXISTENCE_INTERVAL: float = 3
    EXISTENCE_TIMEOUT: float = 15
    STABILIZATION_INTERVAL: float = 5
    STABILIZATION_TIMEOUT: float = 60
    LOG_TAIL_LINES: int = 5

    # Custom object readiness wait (seconds)
    CUSTOM_OBJECT_INTERVAL: float = 10
    CUSTOM_OBJECT_TIMEOUT: float = 120

    # Pod states that end stabilization immediately
    ERROR_STATES: tuple[str, ...] = (
        "CrashLoopBackOff",
        "Error",
        "ImagePullBackOff",
        "ErrImagePull",
        "CreateContainerConfigError",
        "InvalidImageName",
    )
    # Pod states that count as settled
    SETTLED_STATES: tuple[str, ...] = ("Running", "Completed")

    # Namespace rollup badges
    BADGE_OK: str = "OK"
    BADGE_FAIL: str = "FAIL"
    BADGE_SKIP: str = "SKIP"

    # Relative path fragments for project structure
    TOOLS_DIR: str = "tools"
    VALUES_FILE: str = "values.yaml"
    MANIFESTS_DIR: str = "manifests"
    CONFIG_FILE: str = "config.yaml"
    ENV_FILE: str = ".env"

    def is_error_state(self, status: str) -> bool:
        """Check whether a pod status string names a terminal error."""
        bare = status.removeprefix("Init:")
        return any(state in bare for state in self.ERROR_STATES)

    def is_settled_state(self, status: str) -> bool:
        return status in self.SETTLED_STATES


class InstallerPaths:
    """Path resolver for installer payloads and project files.

    Configuration payloads live under the tools directory, one folder per
    component: ``tools/<component>/values.yaml`` and
    ``tools/<component>/manifests/*.yaml``.
    """

    def __init__(self, project_root: Path, tools_dir: Path | None = None) -> None:
        """Initialize installer paths.

        Args:
            project_root: Path to the project root directory
            tools_dir: Override for the tools directory (absolute, or
                       relative to the project root)
        """
        self._project_root = project_root
        self._constants = DEFAULT_CONSTANTS

        if tools_dir is None:
            tools_dir = Path(self._constants.TOOLS_DIR)
        self.tools = tools_dir if tools_dir.is_absolute() else project_root / tools_dir

    @property
    def project_root(self) -> Path:
        """Get path to project root."""
        return self._project_root

    @property
    def config_yaml(self) -> Path:
        """Get path to config.yaml."""
        return self.project_root / self._constants.CONFIG_FILE

    @property
    def env_file(self) -> Path:
        """Get path to .env file."""
        return self.project_root / self._constants.ENV_FILE

    def tool_dir(self, tool: str) -> Path:
        return self.tools / tool

    def values_file(self, tool: str) -> Path:
        """Get path to a component's Helm values file."""
        return self.tool_dir(tool) / self._constants.VALUES_FILE

    def manifest(self, tool: str, name: str) -> Path:
        """Get path to one of a component's raw manifests."""
        return self.tool_dir(tool) / self._constants.MANIFESTS_DIR / name


DEFAULT_CONSTANTS = InstallerConstants()
