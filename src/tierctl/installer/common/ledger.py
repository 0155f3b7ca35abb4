from __future__ import annotations

from collections.abc import Iterator

from loguru import logger


class FailureLedger:
    """Ordered record of the components that failed during one run.

    Append-only and without deduplication; each caller records a given
    component at most once.
    """

    def __init__(self) -> None:
        self._failures: list[str] = []

    def record_failure(self, name: str) -> None:
        logger.debug(f"Recording failure: {name}")
        self._failures.append(name)

    @property
    def failures(self) -> tuple[str, ...]:
        return tuple(self._failures)

    @property
    def has_failures(self) -> bool:
        return bool(self._failures)

    def __len__(self) -> int:
        return len(self._failures)

    def __iter__(self) -> Iterator[str]:
        return iter(self.failures)
