"""Weekly and monthly threshold reward evaluation.

These functions only predict whether a bonus is due. Paying it out, which
moves the counters, lives in edusagar.progress.
"""
from typing import Callable, Optional

from loguru import logger

from edusagar.config import RewardConfig
from edusagar.models import MonthlyRewardResult, WeeklyRewardResult


def calculate_weekly_reward(weekly_points: int, config: Optional[RewardConfig] = None) -> WeeklyRewardResult:
    config = config or RewardConfig()
    if weekly_points >= config.weekly_threshold:
        # The weekly counter carries the bonus value forward instead of zeroing
        return WeeklyRewardResult(
            weekly_points_earned=weekly_points,
            bonus_awarded=True,
            new_weekly_points=config.weekly_bonus,
            message=f"Weekly Champion! Bonus {config.weekly_bonus} points awarded!",
        )
    needed = config.weekly_threshold - weekly_points
    return WeeklyRewardResult(
        weekly_points_earned=weekly_points,
        bonus_awarded=False,
        new_weekly_points=0,
        message=f"{needed} more points needed for weekly bonus!",
    )


def calculate_monthly_reward(
    fetch_month_points: Callable[[], int],
    config: Optional[RewardConfig] = None,
) -> MonthlyRewardResult:
    """Evaluate the monthly threshold against a stored month-scoped point sum.

    Args:
        fetch_month_points: Zero-argument callable returning the points
            earned in the current calendar month.
        config: Reward rules (defaults if None).

    Returns:
        MonthlyRewardResult. If the point sum cannot be read, a result with
        no bonus and zero points.
    """
    config = config or RewardConfig()
    try:
        month_points = fetch_month_points() or 0
    except Exception:
        logger.exception("Error calculating monthly reward")
        return MonthlyRewardResult(
            monthly_points_earned=0,
            bonus_awarded=False,
            new_monthly_points=0,
            message="Unable to calculate monthly reward",
        )
    if month_points >= config.monthly_threshold:
        return MonthlyRewardResult(
            monthly_points_earned=month_points,
            bonus_awarded=True,
            new_monthly_points=config.monthly_bonus,
            message=f"Monthly Master! Bonus {config.monthly_bonus} points awarded!",
        )
    needed = config.monthly_threshold - month_points
    return MonthlyRewardResult(
        monthly_points_earned=month_points,
        bonus_awarded=False,
        new_monthly_points=0,
        message=f"{needed} more points needed for monthly master bonus!",
    )
