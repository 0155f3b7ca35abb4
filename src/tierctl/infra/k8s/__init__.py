"""Kubernetes infrastructure abstraction layer.

This module provides a thin abstraction over the cluster queries the
installer needs, supporting multiple backends (kubectl subprocess, kr8s
library).

Example:
    from tierctl.infra.k8s import KubectlController, KubernetesControllerSync

    k8s = KubernetesControllerSync(KubectlController())
    pods = k8s.get_pods("falco")
"""

from .controller import (
    CommandResult,
    CustomObjectInfo,
    KubernetesController,
    KubernetesControllerSync,
    PodInfo,
)
from .helpers import get_k8s_controller, get_k8s_controller_sync
from .kubectl_controller import KubectlController
from .utils import run_sync

__all__ = [
    # Controller classes
    "KubernetesController",
    "KubernetesControllerSync",
    "KubectlController",
    # Data classes
    "CommandResult",
    "PodInfo",
    "CustomObjectInfo",
    # Factories and utilities
    "get_k8s_controller",
    "get_k8s_controller_sync",
    "run_sync",
]
