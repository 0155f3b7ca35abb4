"""Data types for shell command results.

CommandResult is re-exported from tierctl.infra.k8s.controller so both
layers share one result type.
"""

from tierctl.infra.k8s.controller import CommandResult

__all__ = [
    "CommandResult",
]
