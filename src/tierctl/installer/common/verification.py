"""Post-install health verification.

Helm's ``--wait`` only proves the release's resources were accepted and
reported ready once. :class:`HealthVerifier` watches the namespace's pods
afterwards and reports a verdict of its own.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger
from rich.text import Text

from tierctl.runtime.config import CustomObjectWaitSettings, VerificationSettings
from tierctl.utils.console_like import ConsoleLike, coalesce_console

from .ledger import FailureLedger
from .polling import PollObservation, PollResult, PollStatus, poll_until
from .status import PodTally, tally_pods

if TYPE_CHECKING:
    from tierctl.installer.shell_commands import KubectlCommands


class HealthVerdict(str, Enum):
    HEALTHY = "healthy"
    FAILING = "failing"
    UNREADY = "unready"


class HealthVerifier:
    """Verifies that an installed component's pods reach a healthy state.

    Failures are reported through the console and recorded in the run's
    ledger; nothing here raises for an unhealthy component.

    Attributes:
        kubectl: Cluster query commands
        ledger: Failure ledger of the current run
        settings: Pod verification timings
        object_wait: Custom-object readiness timings
    """

    def __init__(
        self,
        kubectl: KubectlCommands,
        ledger: FailureLedger,
        *,
        settings: VerificationSettings | None = None,
        object_wait: CustomObjectWaitSettings | None = None,
        console: ConsoleLike | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.kubectl = kubectl
        self.ledger = ledger
        self.settings = settings or VerificationSettings()
        self.object_wait = object_wait or CustomObjectWaitSettings()
        self._console = coalesce_console(console)
        self._sleep = sleep
        self._clock = clock

    # =========================================================================
    # Pods
    # =========================================================================

    def verify_install(self, namespace: str, display_name: str) -> HealthVerdict:
        """Wait for a component's pods to settle and report the verdict.

        1. Wait for at least one pod to exist.
        2. Poll the pods: any pod in an error state fails immediately,
           all pods running or completed is healthy.
        3. If the window closes with pods still starting, the component is
           unready.

        A namespace that never gets pods counts as healthy (CRD-only charts).

        Args:
            namespace: Namespace the component was installed into
            display_name: Human-readable component name, used in output and
                          as the ledger entry

        Returns:
            HealthVerdict for this component
        """
        self._console.info(f"Verifying {display_name} pods in {namespace}...")

        def pods_exist() -> PollObservation:
            pods = self.kubectl.get_pods(namespace)
            return PollObservation.healthy(pods) if pods else PollObservation.pending()

        self._poll(
            pods_exist,
            interval=self.settings.existence_interval,
            timeout=self.settings.existence_timeout,
            label=f"{display_name} pods exist",
        )

        def pods_settled() -> PollObservation:
            tally = tally_pods(self.kubectl.get_pods(namespace))
            if tally.failing:
                return PollObservation.failing(tally)
            if tally.settled:
                return PollObservation.healthy(tally)
            return PollObservation.pending(tally)

        result = self._poll(
            pods_settled,
            interval=self.settings.stabilization_interval,
            timeout=self.settings.stabilization_timeout,
            label=f"{display_name} pods settled",
        )
        tally: PodTally = result.value

        if result.status is PollStatus.HEALTHY:
            self._console.ok(
                f"{display_name}: {tally.running}/{tally.total} pods running"
            )
            return HealthVerdict.HEALTHY

        if result.status is PollStatus.FAILING:
            self._report_failing(namespace, display_name, tally)
            self.ledger.record_failure(display_name)
            return HealthVerdict.FAILING

        self._console.warn(
            f"{display_name}: pods not ready after "
            f"{self.settings.stabilization_timeout:g}s"
        )
        self._console.print(Text(self.kubectl.get_pods_wide(namespace).rstrip()))
        self.ledger.record_failure(display_name)
        return HealthVerdict.UNREADY

    def _report_failing(self, namespace: str, display_name: str, tally: PodTally) -> None:
        self._console.error(f"{display_name}: pods in error state")
        for pod in tally.failing:
            self._console.print(Text(f"  {pod.name}  {pod.status}"))
            if self.settings.log_tail_lines <= 0:
                continue
            logs = self.kubectl.get_pod_logs(
                namespace, pod.name, tail=self.settings.log_tail_lines
            )
            for line in (logs.stdout or logs.stderr).splitlines():
                self._console.print(Text(f"    {line}", style="dim"))

    # =========================================================================
    # Custom objects
    # =========================================================================

    def wait_for_custom_objects(
        self,
        resource: str,
        display_name: str,
        *,
        condition: str = "Healthy",
    ) -> HealthVerdict:
        """Wait until every object of a custom resource reports a condition.

        There is no fail-fast branch: unhealthy objects are assumed to still
        be converging until the window closes. Succeeds only when at least
        one object exists and all of them report ``condition=True``.

        Args:
            resource: Resource name (e.g., "providers.pkg.crossplane.io")
            display_name: Name used in output and as the ledger entry
            condition: Condition type to require

        Returns:
            HEALTHY, or UNREADY after recording a failure on timeout
        """
        self._console.info(f"Waiting for {display_name} to report {condition}...")

        def all_healthy() -> PollObservation:
            objects = self.kubectl.get_custom_objects(resource)
            healthy = sum(1 for obj in objects if obj.condition_true(condition))
            counts = (healthy, len(objects))
            logger.debug(f"{display_name}: {healthy}/{len(objects)} {condition}")
            if objects and healthy == len(objects):
                return PollObservation.healthy(counts)
            return PollObservation.pending(counts)

        result = self._poll(
            all_healthy,
            interval=self.object_wait.interval,
            timeout=self.object_wait.timeout,
            label=f"{display_name} {condition}",
        )
        healthy, total = result.value

        if result.status is PollStatus.HEALTHY:
            self._console.ok(f"{display_name}: {healthy}/{total} {condition}")
            return HealthVerdict.HEALTHY

        self._console.warn(
            f"{display_name}: {healthy}/{total} {condition} after "
            f"{self.object_wait.timeout:g}s"
        )
        self.ledger.record_failure(display_name)
        return HealthVerdict.UNREADY

    def _poll(
        self,
        probe: Callable[[], PollObservation],
        *,
        interval: float,
        timeout: float,
        label: str,
    ) -> PollResult:
        return poll_until(
            probe,
            interval=interval,
            timeout=timeout,
            sleep=self._sleep,
            clock=self._clock,
            label=label,
        )
