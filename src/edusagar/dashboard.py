"""Progress dashboard figures and leaderboard."""
import sqlite3
from contextlib import closing
from typing import Optional

from loguru import logger

from edusagar.config import RewardConfig
from edusagar.db import get_connection
from edusagar.models import UserProgress


def _percent(value: int, target: int) -> int:
    if target <= 0:
        return 100
    return round(min(value / target * 100, 100))


def get_weekly_progress(user: UserProgress, config: Optional[RewardConfig] = None) -> int:
    config = config or RewardConfig()
    return _percent(user.weekly_points, config.weekly_threshold)


def get_monthly_progress(month_points: int, config: Optional[RewardConfig] = None) -> int:
    config = config or RewardConfig()
    return _percent(month_points, config.monthly_threshold)


def get_progress_color(percent: float) -> str:
    if percent >= 100:
        return "green"
    elif percent >= 60:
        return "yellow"
    elif percent >= 30:
        return "dark_orange"
    return "red"


def get_next_milestone(user: UserProgress, month_points: int, config: Optional[RewardConfig] = None) -> dict:
    """The nearest unreached reward: weekly first, then monthly."""
    config = config or RewardConfig()
    weekly_needed = max(0, config.weekly_threshold - user.weekly_points)
    if weekly_needed > 0:
        return {
            "type": "weekly",
            "points_needed": weekly_needed,
            "reward": config.weekly_bonus,
            "days_left": 7,
            "message": f"{weekly_needed} points until weekly bonus!",
        }
    monthly_needed = max(0, config.monthly_threshold - month_points)
    return {
        "type": "monthly",
        "points_needed": monthly_needed,
        "reward": config.monthly_bonus,
        "days_left": None,
        "message": f"Aiming for monthly master! {monthly_needed} points needed.",
    }


def get_leaderboard(db_path: str, limit: int = 100) -> list[dict]:
    try:
        with closing(get_connection(db_path)) as conn:
            rows = conn.execute(
                """SELECT id, name, total_points, weekly_points, streak
                FROM users ORDER BY total_points DESC, weekly_points DESC, id ASC LIMIT ?""",
                (limit,),
            ).fetchall()
    except sqlite3.Error:
        logger.exception("Error fetching leaderboard")
        return []
    return [dict(r, rank=i) for i, r in enumerate(rows, 1)]


def get_study_stats(db_path: str, user_id: str) -> dict:
    try:
        with closing(get_connection(db_path)) as conn:
            flashcards = conn.execute(
                "SELECT COUNT(*) FROM flashcard_results WHERE user_id = ?", (user_id,)
            ).fetchone()[0]
            quiz_row = conn.execute(
                "SELECT COUNT(*) as t, AVG(is_correct) * 100 as avg FROM quiz_results WHERE user_id = ?",
                (user_id,),
            ).fetchone()
            lessons = conn.execute(
                "SELECT COUNT(*) FROM point_events WHERE user_id = ? AND kind = 'lesson_complete'", (user_id,)
            ).fetchone()[0]
    except sqlite3.Error:
        logger.exception("Error reading study stats for {}", user_id)
        return {"lessons_completed": 0, "flashcards_reviewed": 0, "quiz_answers": 0, "avg_quiz_score": 0.0}
    return {
        "lessons_completed": lessons,
        "flashcards_reviewed": flashcards,
        "quiz_answers": quiz_row["t"],
        "avg_quiz_score": round(quiz_row["avg"], 1) if quiz_row["avg"] else 0.0,
    }
