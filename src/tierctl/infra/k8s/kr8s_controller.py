"""Kr8s-based implementation of KubernetesController.

Read queries use the kr8s library's native async API. Mutations that
have no direct kr8s equivalent (manifest apply/delete, multi-type label
deletes, log tails) fall back to the kubectl implementation.
"""

from __future__ import annotations

from typing import Any

import kr8s
from kr8s.asyncio.objects import CustomResourceDefinition, Pod
from loguru import logger

from .controller import CustomObjectInfo, PodInfo, parse_conditions, parse_pod
from .kubectl_controller import KubectlController


class Kr8sController(KubectlController):
    """Kubernetes controller using the kr8s library.

    Note: The kr8s API client is NOT cached because it's tied to the event loop
    that was running when created. run_sync() calls asyncio.run(), so each call
    gets a new event loop and needs a fresh client.
    """

    async def _get_api(self) -> Any:  # Returns kr8s._api.Api
        return await kr8s.asyncio.api()

    # =========================================================================
    # Cluster
    # =========================================================================

    async def get_current_context(self) -> str:
        """Get the current kubectl context name."""
        try:
            api = await self._get_api()
            return api.auth.active_context or "unknown"
        except Exception as e:
            logger.debug(f"kr8s context lookup failed: {e}")
            return "unknown"

    async def cluster_reachable(self) -> bool:
        """Check whether the API server answers a version request."""
        try:
            api = await self._get_api()
            await api.version()
            return True
        except Exception as e:
            logger.debug(f"kr8s cluster check failed: {e}")
            return False

    async def count_nodes(self) -> int:
        """Count nodes in the cluster."""
        try:
            api = await self._get_api()
            return len([node async for node in api.get("nodes")])
        except Exception as e:
            logger.debug(f"kr8s node listing failed: {e}")
            return 0

    # =========================================================================
    # Pod Operations
    # =========================================================================

    async def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[PodInfo]:
        """Get pods in a namespace with their status."""
        kwargs: dict[str, Any] = {"namespace": namespace}
        if label_selector:
            kwargs["label_selector"] = label_selector
        try:
            api = await self._get_api()
            return [parse_pod(pod.raw) async for pod in Pod.list(api=api, **kwargs)]
        except Exception as e:
            logger.debug(f"kr8s pod listing failed for {namespace}: {e}")
            return []

    # =========================================================================
    # Custom Resources
    # =========================================================================

    async def crd_exists(self, name: str) -> bool:
        """Check whether a CustomResourceDefinition is registered."""
        try:
            api = await self._get_api()
            await CustomResourceDefinition.get(name, api=api)
            return True
        except kr8s.NotFoundError:
            return False
        except Exception as e:
            logger.debug(f"kr8s CRD lookup failed for {name}: {e}")
            return False

    async def get_custom_objects(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
    ) -> list[CustomObjectInfo]:
        """List custom objects with their status conditions."""
        kwargs: dict[str, Any] = {}
        if all_namespaces:
            kwargs["namespace"] = kr8s.ALL
        elif namespace:
            kwargs["namespace"] = namespace
        try:
            api = await self._get_api()
            return [
                CustomObjectInfo(
                    name=obj.name,
                    conditions=parse_conditions(obj.raw.get("status", {}) or {}),
                )
                async for obj in api.get(resource, **kwargs)
            ]
        except Exception as e:
            logger.debug(f"kr8s listing of {resource} failed: {e}")
            return []
