"""Common installer library shared by every tier.

Progress display, the Helm install wrapper, bounded polling, pod health
verification, the namespace status rollup, the failure ledger and the
prerequisite check.
"""

from .context import RunContext
from .helm import HelmRepository, helm_install, helm_repo_add, setup_repositories
from .ledger import FailureLedger
from .polling import (
    Observation,
    PollObservation,
    PollResult,
    PollStatus,
    poll_until,
)
from .prerequisites import check_prerequisites
from .progress import ProgressTracker
from .status import NamespaceBadge, PodTally, print_namespace_status, tally_pods
from .verification import HealthVerdict, HealthVerifier

__all__ = [
    "FailureLedger",
    "HealthVerdict",
    "HealthVerifier",
    "HelmRepository",
    "NamespaceBadge",
    "Observation",
    "PodTally",
    "PollObservation",
    "PollResult",
    "PollStatus",
    "ProgressTracker",
    "RunContext",
    "check_prerequisites",
    "helm_install",
    "helm_repo_add",
    "poll_until",
    "print_namespace_status",
    "setup_repositories",
    "tally_pods",
]
