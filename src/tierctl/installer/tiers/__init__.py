"""Installation tiers, in dependency order."""

from .base import Tier
from .components import ComponentDescriptor
from .tier1_security import SecurityCoreTier
from .tier2_observability import ObservabilityTier
from .tier3_platform import PlatformTier
from .tier4_managed import ManagedTier

TIER_CLASSES: tuple[type[Tier], ...] = (
    SecurityCoreTier,
    ObservabilityTier,
    PlatformTier,
    ManagedTier,
)

__all__ = [
    "ComponentDescriptor",
    "ManagedTier",
    "ObservabilityTier",
    "PlatformTier",
    "SecurityCoreTier",
    "TIER_CLASSES",
    "Tier",
]
