"""Kubectl-based implementation of KubernetesController.

Uses subprocess calls to kubectl for all operations.
"""

from __future__ import annotations

import asyncio
import json
import subprocess
from pathlib import Path

from loguru import logger

from .controller import (
    CommandResult,
    CustomObjectInfo,
    KubernetesController,
    PodInfo,
    parse_conditions,
    parse_pod,
)


class KubectlController(KubernetesController):
    """Kubernetes controller using kubectl subprocess calls.

    All methods are async but internally use asyncio.to_thread()
    to run blocking subprocess calls without blocking the event loop.
    """

    async def _run_kubectl(
        self,
        args: list[str],
        *,
        capture_output: bool = True,
    ) -> CommandResult:
        """Run a kubectl command asynchronously.

        Args:
            args: Command arguments (without 'kubectl' prefix)
            capture_output: Whether to capture stdout/stderr

        Returns:
            CommandResult with execution results
        """
        cmd = ["kubectl", *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        def _run() -> CommandResult:
            try:
                result = subprocess.run(cmd, capture_output=capture_output, text=True)
            except FileNotFoundError:
                return CommandResult(
                    success=False, stderr="kubectl not found on PATH", returncode=127
                )
            return CommandResult(
                success=result.returncode == 0,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
                returncode=result.returncode,
            )

        return await asyncio.to_thread(_run)

    async def _get_json(self, args: list[str]) -> dict | None:
        result = await self._run_kubectl([*args, "-o", "json"])
        if not result.success or not result.stdout:
            return None
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug(f"Unparseable kubectl output for {args}")
            return None

    # =========================================================================
    # Cluster
    # =========================================================================

    async def get_current_context(self) -> str:
        """Get the current kubectl context name."""
        result = await self._run_kubectl(["config", "current-context"])
        return result.stdout.strip() if result.success else "unknown"

    async def cluster_reachable(self) -> bool:
        """Check whether the API server answers ``cluster-info``."""
        result = await self._run_kubectl(["cluster-info"])
        return result.success

    async def count_nodes(self) -> int:
        """Count nodes in the cluster."""
        data = await self._get_json(["get", "nodes"])
        if data is None:
            return 0
        return len(data.get("items", []))

    # =========================================================================
    # Namespace Operations
    # =========================================================================

    async def delete_namespace(
        self,
        namespace: str,
        *,
        wait: bool = True,
        timeout: str = "120s",
    ) -> CommandResult:
        """Delete a Kubernetes namespace and all its resources."""
        args = ["delete", "namespace", namespace, "--ignore-not-found"]
        if wait:
            args.append("--wait=true")
            args.extend(["--timeout", timeout])
        else:
            args.append("--wait=false")
        return await self._run_kubectl(args)

    # =========================================================================
    # Resource Operations
    # =========================================================================

    async def apply_manifest(self, manifest_path: Path) -> CommandResult:
        """Apply a Kubernetes manifest file."""
        return await self._run_kubectl(["apply", "-f", str(manifest_path)])

    async def delete_manifest(self, manifest_path: Path) -> CommandResult:
        """Delete the objects described by a manifest file."""
        return await self._run_kubectl(
            ["delete", "-f", str(manifest_path), "--ignore-not-found"]
        )

    async def delete_all(
        self,
        resource_type: str,
        namespace: str | None = None,
    ) -> CommandResult:
        """Delete every object of a resource type."""
        args = ["delete", resource_type, "--all", "--ignore-not-found"]
        if namespace:
            args.extend(["-n", namespace])
        return await self._run_kubectl(args)

    async def delete_resources_by_label(
        self,
        resource_types: str,
        namespace: str,
        label_selector: str,
    ) -> CommandResult:
        """Delete Kubernetes resources matching a label selector."""
        return await self._run_kubectl(
            [
                "delete",
                resource_types,
                "-n",
                namespace,
                "-l",
                label_selector,
                "--ignore-not-found",
            ]
        )

    async def delete_named(
        self,
        resource_type: str,
        names: list[str],
        namespace: str | None = None,
    ) -> CommandResult:
        """Delete specific objects by name."""
        if not names:
            return CommandResult(success=True)
        args = ["delete", resource_type, *names, "--ignore-not-found"]
        if namespace:
            args.extend(["-n", namespace])
        return await self._run_kubectl(args)

    # =========================================================================
    # Pod Operations
    # =========================================================================

    async def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> list[PodInfo]:
        """Get pods in a namespace with their status.

        Args:
            namespace: Kubernetes namespace to search
            label_selector: Optional label selector (e.g., "app.kubernetes.io/name=falco")

        Returns:
            List of PodInfo objects matching the criteria
        """
        args = ["get", "pods", "-n", namespace]
        if label_selector:
            args.extend(["-l", label_selector])

        data = await self._get_json(args)
        if data is None:
            return []
        return [parse_pod(pod) for pod in data.get("items", [])]

    async def get_pod_logs(
        self,
        namespace: str,
        pod: str,
        *,
        tail: int = 5,
    ) -> CommandResult:
        """Get the last lines of a pod's logs."""
        return await self._run_kubectl(["logs", "-n", namespace, pod, f"--tail={tail}"])

    async def get_pods_wide(self, namespace: str) -> str:
        """Get pods in wide format for display."""
        result = await self._run_kubectl(["get", "pods", "-n", namespace, "-o", "wide"])
        return result.stdout if result.success else result.stderr

    # =========================================================================
    # Custom Resources
    # =========================================================================

    async def crd_exists(self, name: str) -> bool:
        """Check whether a CustomResourceDefinition is registered."""
        result = await self._run_kubectl(["get", "crd", name])
        return result.success

    async def get_custom_objects(
        self,
        resource: str,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
    ) -> list[CustomObjectInfo]:
        """List custom objects with their status conditions."""
        args = ["get", resource]
        if all_namespaces:
            args.append("--all-namespaces")
        elif namespace:
            args.extend(["-n", namespace])

        data = await self._get_json(args)
        if data is None:
            return []
        return [
            CustomObjectInfo(
                name=item.get("metadata", {}).get("name", ""),
                conditions=parse_conditions(item.get("status", {}) or {}),
            )
            for item in data.get("items", [])
        ]
