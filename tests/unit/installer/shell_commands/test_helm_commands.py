"""Unit tests for HelmCommands command construction and output streaming."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tierctl.installer.shell_commands import CommandResult, HelmCommands


@pytest.fixture
def runner() -> MagicMock:
    runner = MagicMock()
    runner.run.return_value = CommandResult(success=True)
    return runner


@pytest.fixture
def helm(runner: MagicMock) -> HelmCommands:
    return HelmCommands(runner)


class TestUpgradeInstall:
    """Tests for HelmCommands.upgrade_install."""

    def test_default_flags(self, helm: HelmCommands, runner: MagicMock) -> None:
        helm.upgrade_install("kyverno", "kyverno/kyverno", "kyverno")

        runner.run.assert_called_once_with(
            [
                "helm",
                "upgrade",
                "--install",
                "kyverno",
                "kyverno/kyverno",
                "--namespace",
                "kyverno",
                "--create-namespace",
                "--wait",
                "--timeout",
                "5m",
            ]
        )

    def test_values_and_extra_args(self, helm: HelmCommands, runner: MagicMock) -> None:
        helm.upgrade_install(
            "istio-base",
            "istio/base",
            "istio-system",
            value_files=[Path("tools/istio-base/values.yaml")],
            timeout="3m",
            extra_args=["--set", "defaultRevision=default"],
        )

        cmd = runner.run.call_args.args[0]
        assert cmd[-5:] == [
            "3m",
            "-f",
            "tools/istio-base/values.yaml",
            "--set",
            "defaultRevision=default",
        ]
        assert cmd.index("-f") > cmd.index("--timeout")

    def test_no_wait_no_create_namespace(self, helm: HelmCommands, runner: MagicMock) -> None:
        helm.upgrade_install("x", "repo/x", "ns", wait=False, create_namespace=False)

        cmd = runner.run.call_args.args[0]
        assert "--wait" not in cmd
        assert "--create-namespace" not in cmd

    def test_output_callback_streams(self, helm: HelmCommands, runner: MagicMock) -> None:
        runner.run_streaming.return_value = CommandResult(success=True, stdout="deployed")
        on_output = MagicMock()

        result = helm.upgrade_install("harbor", "harbor/harbor", "harbor", on_output=on_output)

        assert result.stdout == "deployed"
        runner.run.assert_not_called()
        cmd = runner.run_streaming.call_args.args[0]
        assert cmd[:4] == ["helm", "upgrade", "--install", "harbor"]
        assert runner.run_streaming.call_args.kwargs == {"on_output": on_output}


class TestUninstall:
    """Tests for HelmCommands.uninstall."""

    def test_waits_by_default(self, helm: HelmCommands, runner: MagicMock) -> None:
        helm.uninstall("falco", "falco")

        runner.run.assert_called_once_with(["helm", "uninstall", "falco", "-n", "falco", "--wait"])


class TestRepositories:
    """Tests for repository commands."""

    def test_repo_add(self, helm: HelmCommands, runner: MagicMock) -> None:
        helm.repo_add("harbor", "https://helm.goharbor.io")

        runner.run.assert_called_once_with(
            ["helm", "repo", "add", "harbor", "https://helm.goharbor.io"]
        )

    def test_available_uses_which(self, helm: HelmCommands, runner: MagicMock) -> None:
        runner.which.return_value = None

        assert helm.available() is False
        runner.which.assert_called_once_with("helm")

