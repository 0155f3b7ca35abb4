"""Unit tests for the kubectl backend, driven through the sync facade."""

from __future__ import annotations

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from tierctl.infra.k8s import KubectlController, KubernetesControllerSync


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def mock_run():
    with patch("tierctl.infra.k8s.kubectl_controller.subprocess.run") as run:
        run.return_value = _completed()
        yield run


@pytest.fixture
def kubectl() -> KubernetesControllerSync:
    return KubernetesControllerSync(KubectlController())


def _args(mock_run: MagicMock) -> list[str]:
    return mock_run.call_args.args[0]


class TestQueries:
    """Tests for read operations."""

    def test_get_pods_with_selector(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(
            json.dumps(
                {
                    "items": [
                        {
                            "metadata": {"name": "falco-x"},
                            "status": {"phase": "Running"},
                        }
                    ]
                }
            )
        )

        pods = kubectl.get_pods("falco", "app.kubernetes.io/name=falco")

        assert _args(mock_run) == [
            "kubectl",
            "get",
            "pods",
            "-n",
            "falco",
            "-l",
            "app.kubernetes.io/name=falco",
            "-o",
            "json",
        ]
        assert [(p.name, p.status) for p in pods] == [("falco-x", "Running")]

    def test_get_pods_missing_namespace_is_empty(
        self, kubectl: KubernetesControllerSync, mock_run: MagicMock
    ) -> None:
        mock_run.return_value = _completed(returncode=1, stderr="not found")

        assert kubectl.get_pods("nope") == []

    def test_get_custom_objects_all_namespaces(
        self, kubectl: KubernetesControllerSync, mock_run: MagicMock
    ) -> None:
        mock_run.return_value = _completed(
            json.dumps(
                {
                    "items": [
                        {
                            "metadata": {"name": "kyverno"},
                            "status": {"conditions": [{"type": "Ready", "status": "True"}]},
                        }
                    ]
                }
            )
        )

        objects = kubectl.get_custom_objects(
            "servicemonitors.monitoring.coreos.com", all_namespaces=True
        )

        assert "--all-namespaces" in _args(mock_run)
        assert objects[0].name == "kyverno"
        assert objects[0].condition_true("Ready")

    def test_count_nodes(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(json.dumps({"items": [{}, {}, {}]}))

        assert kubectl.count_nodes() == 3

    def test_unparseable_output(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed("<html>")

        assert kubectl.count_nodes() == 0

    def test_pod_logs_tail(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        kubectl.get_pod_logs("harbor", "harbor-core-0", tail=5)

        assert _args(mock_run) == ["kubectl", "logs", "-n", "harbor", "harbor-core-0", "--tail=5"]

    def test_cluster_unreachable(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(returncode=1)

        assert kubectl.cluster_reachable() is False

    def test_missing_binary(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        mock_run.side_effect = FileNotFoundError("kubectl")

        assert kubectl.cluster_reachable() is False
        assert kubectl.get_current_context() == "unknown"


class TestDeletes:
    """Tests for cleanup operations."""

    def test_delete_named_ignores_missing(
        self, kubectl: KubernetesControllerSync, mock_run: MagicMock
    ) -> None:
        kubectl.delete_named("clustersecretstore", ["azure-keyvault"])

        assert _args(mock_run) == [
            "kubectl",
            "delete",
            "clustersecretstore",
            "azure-keyvault",
            "--ignore-not-found",
        ]

    def test_delete_named_without_names_is_noop(
        self, kubectl: KubernetesControllerSync, mock_run: MagicMock
    ) -> None:
        result = kubectl.delete_named("crd", [])

        assert result.success
        mock_run.assert_not_called()

    def test_delete_all_cluster_scoped(
        self, kubectl: KubernetesControllerSync, mock_run: MagicMock
    ) -> None:
        kubectl.delete_all("nodepools")

        assert _args(mock_run) == ["kubectl", "delete", "nodepools", "--all", "--ignore-not-found"]

    def test_delete_namespace_waits(self, kubectl: KubernetesControllerSync, mock_run: MagicMock) -> None:
        kubectl.delete_namespace("falco")

        assert _args(mock_run) == [
            "kubectl",
            "delete",
            "namespace",
            "falco",
            "--ignore-not-found",
            "--wait=true",
            "--timeout",
            "120s",
        ]
