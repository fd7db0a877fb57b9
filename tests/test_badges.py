# tests/test_badges.py
from unittest.mock import Mock

from edusagar.badges import BADGE_CATALOG, check_and_award_badges, get_badge
from edusagar.config import RewardConfig
from edusagar.models import UserProgress


def test_new_user_gets_early_bird_only():
    assert check_and_award_badges(UserProgress(id="u1")) == ["early_bird"]


def test_all_point_and_streak_badges_in_order():
    user = UserProgress(id="u1", total_points=1000, weekly_points=100, streak=5)
    assert check_and_award_badges(user) == [
        "early_bird", "scholar", "top_learner", "streak_star", "weekly_champion",
    ]


def test_thresholds_just_below():
    user = UserProgress(id="u1", total_points=499, weekly_points=99, streak=4, badges=["early_bird"])
    assert check_and_award_badges(user) == []


def test_repeat_evaluation_grants_nothing_new():
    user = UserProgress(id="u1", total_points=600, weekly_points=120, streak=9)
    first = check_and_award_badges(user)
    user.badges = user.badges + first
    assert check_and_award_badges(user) == []


def test_never_returns_held_badges():
    user = UserProgress(id="u1", total_points=1200, streak=10, badges=["scholar", "streak_star"])
    earned = check_and_award_badges(user)
    assert "scholar" not in earned
    assert "streak_star" not in earned
    assert "top_learner" in earned


def test_held_badge_survives_lost_condition():
    user = UserProgress(id="u1", streak=0, badges=["early_bird", "streak_star"])
    assert check_and_award_badges(user) == []
    assert user.badges == ["early_bird", "streak_star"]


def test_scenario_scholar_not_yet_streak_star_granted():
    user = UserProgress(id="u1", total_points=461, streak=6)
    earned = check_and_award_badges(user)
    assert "streak_star" in earned
    assert "scholar" not in earned


def test_monthly_master_from_month_points():
    user = UserProgress(id="u1", badges=["early_bird"])
    assert check_and_award_badges(user, lambda: 650) == ["monthly_master"]
    assert check_and_award_badges(user, lambda: 100) == []


def test_monthly_master_not_queried_when_held():
    fetch = Mock(return_value=900)
    user = UserProgress(id="u1", badges=["early_bird", "monthly_master"])
    assert check_and_award_badges(user, fetch) == []
    fetch.assert_not_called()


def test_monthly_master_skipped_on_source_failure():
    user = UserProgress(id="u1", badges=["early_bird"])
    assert check_and_award_badges(user, Mock(side_effect=OSError("down"))) == []


def test_custom_badge_thresholds():
    config = RewardConfig(scholar_points=50, streak_star_days=2)
    user = UserProgress(id="u1", total_points=50, streak=2, badges=["early_bird"])
    assert check_and_award_badges(user, config=config) == ["scholar", "streak_star"]


def test_catalog_lookup():
    assert get_badge("scholar").name == "Syllabus Master"
    assert get_badge("missing") is None
    assert all(badge_id == badge.id for badge_id, badge in BADGE_CATALOG.items())
