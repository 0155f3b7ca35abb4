from __future__ import annotations

from dataclasses import dataclass, field

from tierctl.runtime.config import FailurePolicy
from tierctl.utils.console_like import ConsoleLike

from .ledger import FailureLedger
from .progress import ProgressTracker


@dataclass
class RunContext:
    """State of one installer invocation, handed to each tier.

    Attributes:
        progress: Step counter, reset by each tier's install
        ledger: Components that failed, across all tiers
        policy: Whether a failure stops the run
    """

    progress: ProgressTracker
    ledger: FailureLedger = field(default_factory=FailureLedger)
    policy: FailurePolicy = FailurePolicy.BEST_EFFORT

    @classmethod
    def create(
        cls,
        console: ConsoleLike | None = None,
        policy: FailurePolicy = FailurePolicy.BEST_EFFORT,
    ) -> RunContext:
        return cls(progress=ProgressTracker(console), policy=policy)

    @property
    def fail_fast(self) -> bool:
        return self.policy is FailurePolicy.FAIL_FAST
