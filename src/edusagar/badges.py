"""Badge catalog and eligibility rules."""
from types import MappingProxyType
from typing import Callable, Optional

from edusagar.config import RewardConfig
from edusagar.models import Badge, UserProgress
from edusagar.rewards import calculate_monthly_reward

BADGE_CATALOG = MappingProxyType({
    "early_bird": Badge("early_bird", "Early Bird", "Started your first learning session", "Zap"),
    "scholar": Badge("scholar", "Syllabus Master", "Earned 500 total points", "BookOpen"),
    "crypto_native": Badge("crypto_native", "Identity Verified", "Linked a wallet for on-chain credentials", "ShieldCheck"),
    "top_learner": Badge("top_learner", "Grand Scholar", "Earned 1000 total points", "Trophy"),
    "streak_star": Badge("streak_star", "Consistent Scholar", "Kept a 5-day learning streak", "Flame"),
    "weekly_champion": Badge("weekly_champion", "Weekly Champion", "Reached the weekly points goal", "Medal"),
    "monthly_master": Badge("monthly_master", "Monthly Master", "Reached the monthly points goal", "Crown"),
})


def get_badge(badge_id: str) -> Optional[Badge]:
    return BADGE_CATALOG.get(badge_id)


def check_and_award_badges(
    user: UserProgress,
    fetch_month_points: Optional[Callable[[], int]] = None,
    config: Optional[RewardConfig] = None,
) -> list[str]:
    """Return ids of badges the user qualifies for but does not hold yet.

    Nothing is persisted here and held badges are never dropped, even when
    their condition no longer holds. monthly_master is only evaluated when
    the user lacks it and a month point source is given.
    """
    config = config or RewardConfig()
    held = set(user.badges)
    satisfied = [
        ("early_bird", True),
        ("scholar", user.total_points >= config.scholar_points),
        ("top_learner", user.total_points >= config.top_learner_points),
        ("streak_star", user.streak >= config.streak_star_days),
        ("weekly_champion", user.weekly_points >= config.weekly_threshold),
    ]
    new_badges = [badge_id for badge_id, ok in satisfied if ok and badge_id not in held]

    if "monthly_master" not in held and fetch_month_points is not None:
        if calculate_monthly_reward(fetch_month_points, config).bonus_awarded:
            new_badges.append("monthly_master")
    return new_badges
