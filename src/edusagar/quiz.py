"""Quiz questions, grading and results."""
import json
import sqlite3
from contextlib import closing
from datetime import datetime
from typing import Optional

from loguru import logger

from edusagar.config import RewardConfig
from edusagar.db import get_connection, local_naive
from edusagar.models import Quiz
from edusagar.progress import record_activity


def _row_to_quiz(row: sqlite3.Row) -> Quiz:
    return Quiz(
        question=row["question"],
        options=json.loads(row["options"]),
        answer=row["answer"],
        id=row["id"],
        course_id=row["course_id"],
    )


def create_quizzes(db_path: str, course_id: str, quizzes: list[Quiz]) -> int:
    """Store quiz questions for a course. Returns the number stored."""
    try:
        with closing(get_connection(db_path)) as conn:
            conn.executemany(
                "INSERT INTO quizzes (course_id, question, options, answer) VALUES (?, ?, ?, ?)",
                [(course_id, q.question, json.dumps(q.options), q.answer) for q in quizzes],
            )
            conn.commit()
    except sqlite3.Error:
        logger.exception("Error storing quizzes for course {}", course_id)
        return 0
    return len(quizzes)


def get_quizzes(db_path: str, course_id: Optional[str] = None, count: int = 10) -> list[Quiz]:
    try:
        with closing(get_connection(db_path)) as conn:
            if course_id:
                rows = conn.execute(
                    "SELECT * FROM quizzes WHERE course_id = ? ORDER BY RANDOM() LIMIT ?",
                    (course_id, count),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM quizzes ORDER BY RANDOM() LIMIT ?", (count,)
                ).fetchall()
    except sqlite3.Error:
        logger.exception("Error reading quizzes")
        return []
    return [_row_to_quiz(row) for row in rows]


def grade_answer(quiz: Quiz, user_answer: str) -> bool:
    return user_answer.lower().strip() == quiz.answer.lower().strip()


def record_quiz_answer(
    db_path: str,
    user_id: str,
    quiz: Quiz,
    user_answer: str,
    now: Optional[datetime] = None,
    config: Optional[RewardConfig] = None,
) -> bool:
    """Grade and store an answer. A correct answer earns quiz points."""
    now = local_naive(now or datetime.now())
    is_correct = grade_answer(quiz, user_answer)
    try:
        with closing(get_connection(db_path)) as conn:
            conn.execute(
                """INSERT INTO quiz_results (quiz_id, user_id, question, user_answer, is_correct, answered_at)
                VALUES (?, ?, ?, ?, ?, ?)""",
                (quiz.id, user_id, quiz.question, user_answer, int(is_correct), now.isoformat()),
            )
            conn.commit()
    except sqlite3.Error:
        logger.exception("Error storing quiz answer for {}", user_id)
    if is_correct:
        record_activity(db_path, user_id, "quiz_correct", now, config)
    return is_correct


def get_quiz_score(db_path: str, user_id: str) -> float:
    """Overall quiz score as percentage."""
    try:
        with closing(get_connection(db_path)) as conn:
            row = conn.execute(
                "SELECT COUNT(*) as total, SUM(is_correct) as correct FROM quiz_results WHERE user_id = ?",
                (user_id,),
            ).fetchone()
    except sqlite3.Error:
        logger.exception("Error reading quiz score for {}", user_id)
        return 0.0
    if row["total"] == 0:
        return 0.0
    return round((row["correct"] / row["total"]) * 100, 1)
