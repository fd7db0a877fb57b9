"""Base points per activity and streak multipliers."""
import math
from datetime import datetime
from decimal import Decimal
from typing import Optional

from edusagar.config import RewardConfig
from edusagar.models import ACTIVITY_KINDS, RewardEvent


def get_streak_multiplier(streak: int, config: Optional[RewardConfig] = None) -> float:
    config = config or RewardConfig()
    for min_streak, multiplier in config.streak_multipliers:
        if streak >= min_streak:
            return multiplier
    return 1.0


def calculate_earned_points(base_points: int, streak: int, config: Optional[RewardConfig] = None) -> int:
    """Base points scaled by the streak multiplier, rounded down."""
    # Decimal keeps 10 * 1.1 at exactly 11
    multiplier = Decimal(str(get_streak_multiplier(streak, config)))
    return math.floor(base_points * multiplier)


def base_points_for(kind: str, config: Optional[RewardConfig] = None) -> int:
    if kind not in ACTIVITY_KINDS:
        raise ValueError(f"Unknown activity kind: {kind}")
    config = config or RewardConfig()
    return getattr(config, kind)


def make_event(kind: str, timestamp: datetime, config: Optional[RewardConfig] = None) -> RewardEvent:
    return RewardEvent(kind=kind, base_points=base_points_for(kind, config), timestamp=timestamp)
