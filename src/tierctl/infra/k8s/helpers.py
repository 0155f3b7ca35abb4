from __future__ import annotations

from typing import Literal

from cachetools.func import lru_cache  # type: ignore

from tierctl.infra.k8s.controller import KubernetesController, KubernetesControllerSync

Backend = Literal["kubectl", "kr8s"]


@lru_cache(maxsize=2)
def get_k8s_controller(backend: Backend = "kubectl") -> KubernetesController:
    """Get the KubernetesController for a backend.

    Args:
        backend: "kubectl" (subprocess calls) or "kr8s" (native async client)

    Returns:
        An instance of KubernetesController
    """
    if backend == "kr8s":
        from tierctl.infra.k8s.kr8s_controller import Kr8sController

        return Kr8sController()

    from tierctl.infra.k8s.kubectl_controller import KubectlController

    return KubectlController()


@lru_cache(maxsize=2)
def get_k8s_controller_sync(backend: Backend = "kubectl") -> KubernetesControllerSync:
    """Get a synchronous wrapper for the backend's KubernetesController."""
    return KubernetesControllerSync(get_k8s_controller(backend))
