"""Subscription tier to generation parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from models import Tier


class EngineStrength(str, Enum):
    STANDARD = "standard"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class TierPolicy:
    """Generation parameters derived from a tier. No hidden state."""

    engine_strength: EngineStrength
    use_live_augmentation: bool
    detail_multiplier: int = 1

    @property
    def amplified_detail(self) -> bool:
        return self.detail_multiplier > 1


_POLICIES: Dict[Tier, TierPolicy] = {
    Tier.FREE: TierPolicy(EngineStrength.STANDARD, use_live_augmentation=False, detail_multiplier=1),
    Tier.PRO: TierPolicy(EngineStrength.ADVANCED, use_live_augmentation=True, detail_multiplier=1),
    Tier.PREMIUM: TierPolicy(EngineStrength.ADVANCED, use_live_augmentation=True, detail_multiplier=2),
}


def resolve_policy(tier: Union[Tier, str]) -> TierPolicy:
    """Return the policy for ``tier``; unknown tiers raise ValueError."""
    try:
        key = Tier(tier)
    except ValueError as exc:
        raise ValueError(f"Unknown subscription tier: {tier!r}") from exc
    return _POLICIES[key]
