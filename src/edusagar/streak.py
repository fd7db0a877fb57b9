"""Day-based streak continuity."""
import math
from datetime import datetime
from typing import Optional

from edusagar.models import StreakUpdate

SECONDS_PER_DAY = 24 * 60 * 60


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days between two timestamps, rounded up."""
    return math.ceil(abs((later - earlier).total_seconds()) / SECONDS_PER_DAY)


def update_streak(current_streak: int, last_active_date: Optional[datetime], now: datetime) -> StreakUpdate:
    """Advance, keep or break a streak given the last activity time.

    A missing last activity counts as the Unix epoch, so it breaks the streak.
    Same-day activity leaves the streak unchanged.
    """
    if last_active_date is None:
        last_active_date = datetime(1970, 1, 1, tzinfo=now.tzinfo)
    diff_days = days_between(last_active_date, now)
    if diff_days == 0:
        return StreakUpdate(current_streak, False)
    if diff_days == 1:
        return StreakUpdate(current_streak + 1, False)
    return StreakUpdate(0, True)
