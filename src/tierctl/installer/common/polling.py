"""Bounded polling.

Every wait in the installer (pods appearing, pods stabilizing, custom
objects reporting healthy) is one call to :func:`poll_until` with a probe
that classifies a single observation.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger


class Observation(str, Enum):
    """What a single probe saw."""

    HEALTHY = "healthy"
    FAILING = "failing"
    PENDING = "pending"


class PollStatus(str, Enum):
    """How a poll ended."""

    HEALTHY = "healthy"
    FAILING = "failing"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class PollObservation:
    state: Observation
    value: Any = None

    @classmethod
    def healthy(cls, value: Any = None) -> PollObservation:
        return cls(Observation.HEALTHY, value)

    @classmethod
    def failing(cls, value: Any = None) -> PollObservation:
        return cls(Observation.FAILING, value)

    @classmethod
    def pending(cls, value: Any = None) -> PollObservation:
        return cls(Observation.PENDING, value)


@dataclass(frozen=True)
class PollResult:
    """Outcome of :func:`poll_until`.

    Attributes:
        status: HEALTHY or FAILING as reported by the probe, or TIMED_OUT
        observation: The last observation made
        elapsed: Seconds between the first probe and the outcome
        attempts: Number of probe calls
    """

    status: PollStatus
    observation: PollObservation
    elapsed: float
    attempts: int

    @property
    def value(self) -> Any:
        return self.observation.value


_TERMINAL = {
    Observation.HEALTHY: PollStatus.HEALTHY,
    Observation.FAILING: PollStatus.FAILING,
}


def poll_until(
    probe: Callable[[], PollObservation],
    *,
    interval: float,
    timeout: float,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    label: str = "poll",
) -> PollResult:
    """Call ``probe`` until it reports healthy or failing, or time runs out.

    The probe runs immediately and then every ``interval`` seconds. The
    final sleep is shortened so the last probe lands on the deadline.

    Args:
        probe: Returns the classification of one observation
        interval: Seconds between probes
        timeout: Seconds after which a still-pending probe yields TIMED_OUT
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)
        label: Name used in debug logging

    Returns:
        PollResult tagged with how the wait ended
    """
    start = clock()
    attempts = 0

    while True:
        observation = probe()
        attempts += 1
        elapsed = clock() - start
        logger.debug(
            f"{label}: attempt {attempts} at {elapsed:.1f}s -> {observation.state.value}"
        )

        if observation.state in _TERMINAL:
            return PollResult(_TERMINAL[observation.state], observation, elapsed, attempts)
        if elapsed >= timeout:
            return PollResult(PollStatus.TIMED_OUT, observation, elapsed, attempts)

        sleep(min(interval, timeout - elapsed))
