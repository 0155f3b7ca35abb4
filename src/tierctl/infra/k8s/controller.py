"""Abstract Kubernetes controller interface.

Defines the contract for the cluster queries the installer relies on. Two
backends implement it (kubectl subprocess calls and the kr8s library).

The installer never creates or updates workloads through this interface:
all release mutation goes through Helm. The only mutating calls here are
manifest apply/delete of configuration payloads and the removals used by
tier cleanup.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from .utils import run_sync

# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@dataclass
class PodInfo:
    """Information about a Kubernetes pod.

    ``status`` mirrors the STATUS column of ``kubectl get pods``: the pod
    phase, overridden by a container waiting/terminated reason when one is
    present (e.g. ``CrashLoopBackOff``). Init container reasons are prefixed
    with ``Init:``.
    """

    name: str
    status: str
    restarts: int = 0
    job_owner: str = ""


@dataclass
class CustomObjectInfo:
    """A custom object reduced to its name and status conditions."""

    name: str
    conditions: dict[str, str] = field(default_factory=dict)

    def condition_true(self, condition_type: str) -> bool:
        """Return True when the named condition has status ``True``."""
        return self.conditions.get(condition_type) == "True"


def parse_conditions(status: dict) -> dict[str, str]:
    """Map condition type to condition status from an object's status block."""
    return {
        c.get("type", ""): c.get("status", "")
        for c in status.get("conditions", []) or []
        if c.get("type")
    }


def parse_pod(pod: dict) -> PodInfo:
    """Build a PodInfo from a raw pod object (as returned by the API)."""
    metadata = pod.get("metadata", {})
    status = pod.get("status", {})

    # Check if pod is owned by a Job
    job_owner = ""
    for owner_ref in metadata.get("ownerReferences", []) or []:
        if owner_ref.get("kind") == "Job":
            job_owner = owner_ref.get("name", "")
            break

    # Determine pod status
    pod_status = status.get("phase", "Unknown")
    if pod_status == "Succeeded":
        pod_status = "Completed"
    restarts = 0

    for cs in status.get("initContainerStatuses", []) or []:
        restarts += cs.get("restartCount", 0)
        state = cs.get("state", {})
        if "waiting" in state:
            reason = state["waiting"].get("reason", "")
            if reason and reason != "PodInitializing":
                pod_status = f"Init:{reason}"
        elif "terminated" in state:
            reason = state["terminated"].get("reason", "")
            if reason == "Error":
                pod_status = "Init:Error"

    if not pod_status.startswith("Init:"):
        for cs in status.get("containerStatuses", []) or []:
            restarts += cs.get("restartCount", 0)
            state = cs.get("state", {})
            if "waiting" in state:
                reason = state["waiting"].get("reason", "")
                if reason:
                    pod_status = reason
            elif "terminated" in state:
                reason = state["terminated"].get("reason", "")
                if reason == "Error":
                    pod_status = "Error"

    return PodInfo(
        name=metadata.get("name", ""),
        status=pod_status,
        restarts=restarts,
        job_owner=job_owner,
    )


# =============================================================================
# Abstract Controller
# =============================================================================


class KubernetesController(ABC):
    """Abstract base class for Kubernetes operations.

    All methods are async to support both sync (kubectl) and async (kr8s)
    implementations. Use `run_sync()` or `KubernetesControllerSync` to call
    from synchronous code.
    """

    # =========================================================================
    # Cluster
    # =========================================================================

    @abstractmethod
    async def get_current_context(self) -> str:
        """Get the current kubectl context name.

        Returns:
            Context name, or "unknown" if detection fails
        """
        ...

    @abstractmethod
    async def cluster_reachable(self) -> bool:
        """Check whether the API server answers."""
        ...

    @abstractmethod
    async def count_nodes(self) -> int:
        """Count cluster nodes (0 when the query fails)."""
        ...

    # =========================================================================
    # Namespace Operations
    # =========================================================================

    @abstractmethod
    async def delete_namespace(
        self,
        namespace: str,
        *,
        wait: bool = True,
        timeout: str = "120s",
    ) -> CommandResult:
        """Delete a namespace, ignoring it when already absent.

        Args:
            namespace: Namespace to delete
            wait: Whether to wait for deletion to complete
            timeout: Maximum time to wait

        Returns:
            CommandResult with deletion status
        """
        ...

    # =========================================================================
    # Resource Operations
    # =========================================================================

    @abstractmethod
    async def apply_manifest(self, manifest_path: Path) -> CommandResult:
        """Apply a Kubernetes manifest file.

        Args:
            manifest_path: Path to the YAML manifest file

        Returns:
            CommandResult with apply status
        """
        ...

    @abstractmethod
    async def delete_manifest(self, manifest_path: Path) -> CommandResult:
        """Delete the objects described by a manifest file, if present."""
        ...

    @abstractmethod
    async def delete_all(
        self,
        resource_type: str,
        namespace: str | None = None,
    ) -> CommandResult:
        """Delete every object of a resource type.

        Args:
            resource_type: Resource type (e.g., "nodepools",
                           "providers.pkg.crossplane.io")
            namespace: Namespace for namespaced types, None for cluster scope

        Returns:
            CommandResult with deletion status
        """
        ...

    @abstractmethod
    async def delete_resources_by_label(
        self,
        resource_types: str,
        namespace: str,
        label_selector: str,
    ) -> CommandResult:
        """Delete Kubernetes resources matching a label selector.

        Args:
            resource_types: Comma-separated resource types
                           (e.g., "configmap,secret")
            namespace: Kubernetes namespace
            label_selector: Label selector (e.g., "grafana_dashboard=1")

        Returns:
            CommandResult with deletion status
        """
        ...

    @abstractmethod
    async def delete_named(
        self,
        resource_type: str,
        names: list[str],
        namespace: str | None = None,
    ) -> CommandResult:
        """Delete specific objects by name, ignoring absent ones."""
        ...

    # =========================================================================
    # Pod Operations
    # =========================================================================

    @abstractmethod
    async def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[PodInfo]:
        """Get pods in a namespace with their status.

        Args:
            namespace: Kubernetes namespace
            label_selector: Optional label selector to filter pods

        Returns:
            List of PodInfo objects (empty when the namespace is absent)
        """
        ...

    @abstractmethod
    async def get_pod_logs(
        self,
        namespace: str,
        pod: str,
        *,
        tail: int = 5,
    ) -> CommandResult:
        """Get the last lines of a pod's logs.

        Args:
            namespace: Kubernetes namespace
            pod: Pod name
            tail: Number of lines to show from the end

        Returns:
            CommandResult with logs in stdout
        """
        ...

    @abstractmethod
    async def get_pods_wide(self, namespace: str) -> str:
        """Get pods in wide format for display.

        Args:
            namespace: Kubernetes namespace

        Returns:
            Raw kubectl output in wide format
        """
        ...

    # =========================================================================
    # Custom Resources
    # =========================================================================

    @abstractmethod
    async def crd_exists(self, name: str) -> bool:
        """Check whether a CustomResourceDefinition is registered.

        Args:
            name: Fully-qualified CRD name (e.g., "nodepools.karpenter.sh")
        """
        ...

    @abstractmethod
    async def get_custom_objects(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
    ) -> list[CustomObjectInfo]:
        """List custom objects with their status conditions.

        Args:
            resource: Resource name (e.g., "providers.pkg.crossplane.io")
            namespace: Namespace, or None for cluster-scoped resources
            all_namespaces: List a namespaced resource across every namespace

        Returns:
            List of CustomObjectInfo (empty when the type is unknown)
        """
        ...


class KubernetesControllerSync:
    """Blocking facade over a KubernetesController.

    Each method runs the corresponding coroutine with `run_sync()` so the
    installer's sequential code can stay synchronous.
    """

    def __init__(self, controller: KubernetesController) -> None:
        self._controller = controller

    @property
    def controller(self) -> KubernetesController:
        return self._controller

    def get_current_context(self) -> str:
        return run_sync(self._controller.get_current_context())

    def cluster_reachable(self) -> bool:
        return run_sync(self._controller.cluster_reachable())

    def count_nodes(self) -> int:
        return run_sync(self._controller.count_nodes())

    def delete_namespace(
        self, namespace: str, *, wait: bool = True, timeout: str = "120s"
    ) -> CommandResult:
        return run_sync(
            self._controller.delete_namespace(namespace, wait=wait, timeout=timeout)
        )

    def apply_manifest(self, manifest_path: Path) -> CommandResult:
        return run_sync(self._controller.apply_manifest(manifest_path))

    def delete_manifest(self, manifest_path: Path) -> CommandResult:
        return run_sync(self._controller.delete_manifest(manifest_path))

    def delete_all(
        self, resource_type: str, namespace: str | None = None
    ) -> CommandResult:
        return run_sync(self._controller.delete_all(resource_type, namespace))

    def delete_resources_by_label(
        self, resource_types: str, namespace: str, label_selector: str
    ) -> CommandResult:
        return run_sync(
            self._controller.delete_resources_by_label(
                resource_types, namespace, label_selector
            )
        )

    def delete_named(
        self, resource_type: str, names: list[str], namespace: str | None = None
    ) -> CommandResult:
        return run_sync(self._controller.delete_named(resource_type, names, namespace))

    def get_pods(
        self, namespace: str, label_selector: str | None = None
    ) -> list[PodInfo]:
        return run_sync(self._controller.get_pods(namespace, label_selector))

    def get_pod_logs(self, namespace: str, pod: str, *, tail: int = 5) -> CommandResult:
        return run_sync(self._controller.get_pod_logs(namespace, pod, tail=tail))

    def get_pods_wide(self, namespace: str) -> str:
        return run_sync(self._controller.get_pods_wide(namespace))

    def crd_exists(self, name: str) -> bool:
        return run_sync(self._controller.crd_exists(name))

    def get_custom_objects(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
    ) -> list[CustomObjectInfo]:
        return run_sync(
            self._controller.get_custom_objects(
                resource, namespace, all_namespaces=all_namespaces
            )
        )
