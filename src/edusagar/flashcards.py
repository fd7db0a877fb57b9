"""Flashcard review scheduling with SM-2."""
import sqlite3
from contextlib import closing
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, Optional

from loguru import logger

from edusagar.config import RewardConfig
from edusagar.db import from_iso, get_connection, local_naive
from edusagar.models import Flashcard
from edusagar.progress import record_activity
from edusagar.sm2 import sm2_update


def new_flashcard(front: str, back: str, now: datetime, course_id: Optional[str] = None) -> Flashcard:
    return Flashcard(id=None, front=front, back=back, next_review_date=now, course_id=course_id)


def review_flashcard(card: Flashcard, quality: int, now: datetime) -> Flashcard:
    """Return a copy of the card rescheduled after a review graded 0-5."""
    updated = sm2_update(
        quality=quality,
        ease_factor=card.ease_factor,
        interval=card.interval,
        repetitions=card.repetitions,
    )
    return replace(
        card,
        interval=updated["interval"],
        ease_factor=updated["ease_factor"],
        repetitions=updated["repetitions"],
        next_review_date=now + timedelta(days=updated["interval"]),
    )


def is_due(card: Flashcard, now: datetime) -> bool:
    return now >= card.next_review_date


def filter_due_cards(cards: Iterable[Flashcard], now: datetime) -> list[Flashcard]:
    """Cards whose review time has passed, in their original order."""
    return [card for card in cards if is_due(card, now)]


def _row_to_card(row: sqlite3.Row) -> Flashcard:
    return Flashcard(
        id=row["id"],
        course_id=row["course_id"],
        front=row["front"],
        back=row["back"],
        next_review_date=from_iso(row["next_review_date"]),
        interval=row["interval"],
        ease_factor=row["ease_factor"],
        repetitions=row["repetitions"],
    )


def create_flashcards(db_path: str, course_id: str, pairs: Iterable[tuple[str, str]], now: Optional[datetime] = None) -> int:
    """Insert new cards for a course, all due immediately. Returns the count inserted."""
    now = local_naive(now or datetime.now())
    cards = [new_flashcard(front, back, now, course_id) for front, back in pairs]
    try:
        with closing(get_connection(db_path)) as conn:
            conn.executemany(
                """INSERT INTO flashcards (course_id, front, back, ease_factor, interval, repetitions, next_review_date)
                VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (c.course_id, c.front, c.back, c.ease_factor, c.interval, c.repetitions, c.next_review_date.isoformat())
                    for c in cards
                ],
            )
            conn.commit()
    except sqlite3.Error:
        logger.exception("Error creating flashcards for course {}", course_id)
        return 0
    logger.debug("Created {} flashcards for course {}", len(cards), course_id)
    return len(cards)


def get_flashcards(db_path: str, course_id: Optional[str] = None) -> list[Flashcard]:
    try:
        with closing(get_connection(db_path)) as conn:
            if course_id is None:
                rows = conn.execute("SELECT * FROM flashcards ORDER BY id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM flashcards WHERE course_id = ? ORDER BY id", (course_id,)
                ).fetchall()
    except sqlite3.Error:
        logger.exception("Error fetching flashcards")
        return []
    return [_row_to_card(r) for r in rows]


def get_due_cards(
    db_path: str,
    course_id: Optional[str] = None,
    now: Optional[datetime] = None,
    limit: int = 15,
) -> list[Flashcard]:
    now = local_naive(now or datetime.now())
    return filter_due_cards(get_flashcards(db_path, course_id), now)[:limit]


def record_flashcard_result(
    db_path: str,
    user_id: str,
    card_id: int,
    rating: int,
    now: Optional[datetime] = None,
    config: Optional[RewardConfig] = None,
) -> Optional[Flashcard]:
    """Reschedule a reviewed card, log the rating and award review points."""
    now = local_naive(now or datetime.now())
    try:
        with closing(get_connection(db_path)) as conn:
            row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
            if row is None:
                logger.warning("No flashcard {}", card_id)
                return None
            card = review_flashcard(_row_to_card(row), rating, now)
            conn.execute(
                """UPDATE flashcards SET ease_factor=?, interval=?, repetitions=?, next_review_date=?
                WHERE id=?""",
                (card.ease_factor, card.interval, card.repetitions, card.next_review_date.isoformat(), card_id),
            )
            conn.execute(
                "INSERT INTO flashcard_results (flashcard_id, user_id, rating, reviewed_at) VALUES (?, ?, ?, ?)",
                (card_id, user_id, rating, now.isoformat()),
            )
            conn.commit()
    except sqlite3.Error:
        logger.exception("Error recording review of flashcard {}", card_id)
        return None
    record_activity(db_path, user_id, "flashcard_review", now, config)
    return card
