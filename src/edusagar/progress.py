"""User progress storage: counters, point ledger, badges and bonus payouts.

Every public function here swallows storage errors: the failure is logged
and the caller gets a "no change" result instead of an exception.
"""
import json
import sqlite3
from contextlib import closing
from datetime import datetime, timedelta
from functools import partial
from typing import Callable, Optional

from loguru import logger

from edusagar.badges import check_and_award_badges
from edusagar.config import RewardConfig
from edusagar.db import from_iso, get_connection, local_naive, to_iso
from edusagar.models import ACTIVITY_KINDS, ActivityResult, MonthlyRewardResult, UserProgress, WeeklyRewardResult
from edusagar.points import base_points_for, calculate_earned_points
from edusagar.rewards import calculate_monthly_reward, calculate_weekly_reward
from edusagar.streak import update_streak

UPDATABLE_COLUMNS = {"name", "total_points", "weekly_points", "streak", "last_active_date", "badges", "wallet_address"}


def _row_to_progress(row: sqlite3.Row) -> UserProgress:
    return UserProgress(
        id=row["id"],
        name=row["name"],
        total_points=row["total_points"] or 0,
        weekly_points=row["weekly_points"] or 0,
        streak=row["streak"] or 0,
        last_active_date=from_iso(row["last_active_date"]),
        badges=json.loads(row["badges"] or "[]"),
        wallet_address=row["wallet_address"],
        week_started_at=from_iso(row["week_started_at"]),
    )


def _fetch_user(conn: sqlite3.Connection, user_id: str) -> Optional[UserProgress]:
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _row_to_progress(row) if row else None


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def _week_start(value: datetime) -> datetime:
    """Midnight on the Monday of the week containing value."""
    return _start_of_day(value - timedelta(days=value.weekday()))


def _month_bounds(now: datetime) -> tuple[str, str]:
    start = _start_of_day(local_naive(now).replace(day=1))
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start.isoformat(), end.isoformat()


def create_user(db_path: str, user_id: str, name: str = "", now: Optional[datetime] = None) -> Optional[UserProgress]:
    """Create a progress record with zeroed counters. Existing records are left untouched."""
    now = local_naive(now or datetime.now())
    try:
        with closing(get_connection(db_path)) as conn:
            conn.execute(
                "INSERT OR IGNORE INTO users (id, name, created_at) VALUES (?, ?, ?)",
                (user_id, name, now.isoformat()),
            )
            conn.commit()
            return _fetch_user(conn, user_id)
    except sqlite3.Error:
        logger.exception("Error creating user {}", user_id)
        return None


def get_user_progress(db_path: str, user_id: str) -> Optional[UserProgress]:
    try:
        with closing(get_connection(db_path)) as conn:
            return _fetch_user(conn, user_id)
    except sqlite3.Error:
        logger.exception("Error fetching user {}", user_id)
        return None


def update_user_progress(db_path: str, user_id: str, **changes) -> bool:
    """Write only the given fields of a progress record."""
    unknown = set(changes) - UPDATABLE_COLUMNS
    if unknown:
        logger.warning("Ignoring unknown progress fields: {}", sorted(unknown))
    values = {k: v for k, v in changes.items() if k in UPDATABLE_COLUMNS}
    if not values:
        return False
    if "badges" in values:
        values["badges"] = json.dumps(list(values["badges"]))
    if "last_active_date" in values and isinstance(values["last_active_date"], datetime):
        values["last_active_date"] = to_iso(values["last_active_date"])
    assignments = ", ".join(f"{column} = ?" for column in values)
    try:
        with closing(get_connection(db_path)) as conn:
            cursor = conn.execute(
                f"UPDATE users SET {assignments} WHERE id = ?",
                (*values.values(), user_id),
            )
            conn.commit()
            return cursor.rowcount > 0
    except sqlite3.Error:
        logger.exception("Error updating user {}", user_id)
        return False


def add_badges(db_path: str, user_id: str, badge_ids: list[str]) -> list[str]:
    """Append badges to a user's collection. Returns the ids actually added."""
    if not badge_ids:
        return []
    try:
        with closing(get_connection(db_path)) as conn:
            user = _fetch_user(conn, user_id)
            if user is None:
                logger.warning("Cannot add badges, no user {}", user_id)
                return []
            added = [b for b in dict.fromkeys(badge_ids) if b not in user.badges]
            if added:
                conn.execute(
                    "UPDATE users SET badges = ? WHERE id = ?",
                    (json.dumps(user.badges + added), user_id),
                )
                conn.commit()
                logger.info("{} new badges awarded to {}", len(added), user_id)
            return added
    except sqlite3.Error:
        logger.exception("Error updating badges for {}", user_id)
        return []


def query_month_points(db_path: str, user_id: str, now: datetime) -> int:
    """Activity points earned in the calendar month containing now.

    Raises sqlite3.Error on storage failure; get_month_points is the safe variant.
    """
    start, end = _month_bounds(now)
    placeholders = ", ".join("?" for _ in ACTIVITY_KINDS)
    with closing(get_connection(db_path)) as conn:
        row = conn.execute(
            f"""SELECT COALESCE(SUM(points), 0) FROM point_events
            WHERE user_id = ? AND earned_at >= ? AND earned_at < ?
            AND kind IN ({placeholders})""",
            (user_id, start, end, *ACTIVITY_KINDS),
        ).fetchone()
    return row[0]


def get_month_points(db_path: str, user_id: str, now: Optional[datetime] = None) -> int:
    try:
        return query_month_points(db_path, user_id, local_naive(now or datetime.now()))
    except sqlite3.Error:
        logger.exception("Error reading month points for {}", user_id)
        return 0


def month_points_fetcher(db_path: str, user_id: str, now: datetime) -> Callable[[], int]:
    return partial(query_month_points, db_path, user_id, now)


def record_activity(
    db_path: str,
    user_id: str,
    kind: str,
    now: Optional[datetime] = None,
    config: Optional[RewardConfig] = None,
) -> Optional[ActivityResult]:
    """Apply one qualifying activity: streak, points, ledger and badges.

    The streak is compared on calendar days, and points use the streak as
    it stands after this activity. The weekly counter starts again from
    zero on the first activity of a new Monday-based week.
    """
    now = local_naive(now or datetime.now())
    config = config or RewardConfig()
    base = base_points_for(kind, config)
    try:
        with closing(get_connection(db_path)) as conn:
            user = _fetch_user(conn, user_id)
            if user is None:
                logger.warning("Activity {} for unknown user {}", kind, user_id)
                return None
            last_day = _start_of_day(user.last_active_date) if user.last_active_date else None
            streak = update_streak(user.streak, last_day, _start_of_day(now))
            earned = calculate_earned_points(base, streak.new_streak, config)
            week_start = _week_start(now)
            if user.week_started_at is None:
                user.week_started_at = week_start
            elif week_start > user.week_started_at:
                logger.info("New week for {}, weekly points {} reset", user_id, user.weekly_points)
                user.weekly_points = 0
                user.week_started_at = week_start
            user.total_points += earned
            user.weekly_points += earned
            user.streak = streak.new_streak
            user.last_active_date = now
            conn.execute(
                """UPDATE users SET total_points = ?, weekly_points = ?, streak = ?, last_active_date = ?,
                week_started_at = ? WHERE id = ?""",
                (user.total_points, user.weekly_points, user.streak, to_iso(now), to_iso(user.week_started_at), user_id),
            )
            conn.execute(
                "INSERT INTO point_events (user_id, kind, points, earned_at) VALUES (?, ?, ?, ?)",
                (user_id, kind, earned, now.isoformat()),
            )
            conn.commit()
    except sqlite3.Error:
        logger.exception("Error recording {} for {}", kind, user_id)
        return None

    if streak.streak_broken:
        logger.debug("Streak reset for {}", user_id)
    new_badges = check_and_award_badges(user, month_points_fetcher(db_path, user_id, now), config)
    new_badges = add_badges(db_path, user_id, new_badges)
    return ActivityResult(
        points_earned=earned,
        total_points=user.total_points,
        weekly_points=user.weekly_points,
        streak=user.streak,
        streak_broken=streak.streak_broken,
        new_badges=new_badges,
    )


def reset_weekly_points(db_path: str, user_id: str) -> bool:
    reset = update_user_progress(db_path, user_id, weekly_points=0)
    if reset:
        logger.info("Weekly points reset for user {}", user_id)
    return reset


def award_weekly_bonus(
    db_path: str,
    user_id: str,
    now: Optional[datetime] = None,
    config: Optional[RewardConfig] = None,
) -> Optional[WeeklyRewardResult]:
    """Pay out the weekly bonus if the threshold is met, then zero the weekly counter."""
    now = local_naive(now or datetime.now())
    config = config or RewardConfig()
    try:
        with closing(get_connection(db_path)) as conn:
            user = _fetch_user(conn, user_id)
            if user is None:
                logger.warning("Weekly bonus for unknown user {}", user_id)
                return None
            reward = calculate_weekly_reward(user.weekly_points, config)
            if reward.bonus_awarded:
                conn.execute(
                    "UPDATE users SET total_points = ?, weekly_points = 0 WHERE id = ?",
                    (user.total_points + config.weekly_bonus, user_id),
                )
                conn.execute(
                    "INSERT INTO point_events (user_id, kind, points, earned_at) VALUES (?, 'weekly_bonus', ?, ?)",
                    (user_id, config.weekly_bonus, now.isoformat()),
                )
                conn.commit()
                logger.info("Weekly bonus {} awarded to {}", config.weekly_bonus, user_id)
            return reward
    except sqlite3.Error:
        logger.exception("Error awarding weekly bonus to {}", user_id)
        return None


def award_monthly_bonus(
    db_path: str,
    user_id: str,
    now: Optional[datetime] = None,
    config: Optional[RewardConfig] = None,
) -> Optional[MonthlyRewardResult]:
    """Pay out the monthly bonus at most once per calendar month."""
    now = local_naive(now or datetime.now())
    config = config or RewardConfig()
    reward = calculate_monthly_reward(month_points_fetcher(db_path, user_id, now), config)
    if not reward.bonus_awarded:
        return reward
    start, end = _month_bounds(now)
    try:
        with closing(get_connection(db_path)) as conn:
            user = _fetch_user(conn, user_id)
            if user is None:
                logger.warning("Monthly bonus for unknown user {}", user_id)
                return None
            paid = conn.execute(
                """SELECT COUNT(*) FROM point_events
                WHERE user_id = ? AND kind = 'monthly_bonus' AND earned_at >= ? AND earned_at < ?""",
                (user_id, start, end),
            ).fetchone()[0]
            if paid:
                logger.debug("Monthly bonus already paid to {} this month", user_id)
                return MonthlyRewardResult(
                    monthly_points_earned=reward.monthly_points_earned,
                    bonus_awarded=False,
                    new_monthly_points=0,
                    message="Monthly bonus already awarded this month",
                )
            conn.execute(
                "UPDATE users SET total_points = ? WHERE id = ?",
                (user.total_points + config.monthly_bonus, user_id),
            )
            conn.execute(
                "INSERT INTO point_events (user_id, kind, points, earned_at) VALUES (?, 'monthly_bonus', ?, ?)",
                (user_id, config.monthly_bonus, now.isoformat()),
            )
            conn.commit()
            logger.info("Monthly bonus {} awarded to {}", config.monthly_bonus, user_id)
            return reward
    except sqlite3.Error:
        logger.exception("Error awarding monthly bonus to {}", user_id)
        return None


def link_wallet(db_path: str, user_id: str, address: str) -> bool:
    """Store a wallet address and grant the identity badge."""
    if not update_user_progress(db_path, user_id, wallet_address=address):
        return False
    add_badges(db_path, user_id, ["crypto_native"])
    return True
