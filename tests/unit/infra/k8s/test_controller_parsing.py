"""Unit tests for raw pod and condition parsing."""

from __future__ import annotations

from tierctl.infra.k8s.controller import CustomObjectInfo, parse_conditions, parse_pod


def _pod(phase: str = "Running", **status: object) -> dict:
    return {
        "metadata": {"name": "falco-abc"},
        "spec": {"nodeName": "node-1"},
        "status": {"phase": phase, **status},
    }


class TestParsePod:
    """Tests for parse_pod."""

    def test_running_pod(self) -> None:
        info = parse_pod(
            _pod(containerStatuses=[{"restartCount": 2, "state": {"running": {}}}])
        )

        assert info.name == "falco-abc"
        assert info.status == "Running"
        assert info.restarts == 2

    def test_succeeded_is_completed(self) -> None:
        assert parse_pod(_pod("Succeeded")).status == "Completed"

    def test_waiting_reason_overrides_phase(self) -> None:
        info = parse_pod(
            _pod(
                containerStatuses=[
                    {
                        "restartCount": 5,
                        "state": {"waiting": {"reason": "CrashLoopBackOff"}},
                    }
                ]
            )
        )

        assert info.status == "CrashLoopBackOff"
        assert info.restarts == 5

    def test_terminated_error(self) -> None:
        info = parse_pod(
            _pod(containerStatuses=[{"state": {"terminated": {"reason": "Error"}}}])
        )

        assert info.status == "Error"

    def test_init_container_reason_is_prefixed(self) -> None:
        info = parse_pod(
            _pod(
                "Pending",
                initContainerStatuses=[
                    {"state": {"waiting": {"reason": "ImagePullBackOff"}}}
                ],
                containerStatuses=[
                    {"state": {"waiting": {"reason": "PodInitializing"}}}
                ],
            )
        )

        assert info.status == "Init:ImagePullBackOff"

    def test_pod_initializing_is_ignored_for_init_containers(self) -> None:
        info = parse_pod(
            _pod(
                "Pending",
                initContainerStatuses=[
                    {"state": {"waiting": {"reason": "PodInitializing"}}}
                ],
            )
        )

        assert info.status == "Pending"

    def test_job_owner(self) -> None:
        raw = _pod("Succeeded")
        raw["metadata"]["ownerReferences"] = [{"kind": "Job", "name": "trivy-scan"}]

        assert parse_pod(raw).job_owner == "trivy-scan"

    def test_missing_fields(self) -> None:
        info = parse_pod({})

        assert info.name == ""
        assert info.status == "Unknown"


class TestConditions:
    """Tests for parse_conditions and CustomObjectInfo."""

    def test_maps_type_to_status(self) -> None:
        conditions = parse_conditions(
            {
                "conditions": [
                    {"type": "Installed", "status": "True"},
                    {"type": "Healthy", "status": "False"},
                    {"status": "True"},
                ]
            }
        )

        assert conditions == {"Installed": "True", "Healthy": "False"}

    def test_no_conditions(self) -> None:
        assert parse_conditions({}) == {}
        assert parse_conditions({"conditions": None}) == {}

    def test_condition_true(self) -> None:
        obj = CustomObjectInfo("provider-azure", {"Healthy": "True", "Installed": "Unknown"})

        assert obj.condition_true("Healthy")
        assert not obj.condition_true("Installed")
        assert not obj.condition_true("Ready")
