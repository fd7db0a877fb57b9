"""Import flashcards and quizzes from generated course content."""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger

from edusagar.flashcards import create_flashcards
from edusagar.models import Quiz
from edusagar.quiz import create_quizzes


def read_content(file_path: str) -> Any:
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(path.read_text())
    return json.loads(path.read_text())


def _card_entries(data: Any) -> list:
    """Locate the card list in a generated payload.

    Accepts a bare list, a dict with "flashcards", or a course/module dict
    whose "modules" carry their own "flashcards".
    """
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    entries = list(data.get("flashcards") or [])
    for module in data.get("modules") or []:
        entries.extend(_card_entries(module) if isinstance(module, dict) else [])
    return entries


def parse_flashcards(data: Any) -> list[tuple[str, str]]:
    pairs = []
    for entry in _card_entries(data):
        front = entry.get("front") if isinstance(entry, dict) else None
        back = entry.get("back") if isinstance(entry, dict) else None
        if not front or not back:
            logger.warning("Skipping flashcard without front/back: {!r}", entry)
            continue
        pairs.append((str(front).strip(), str(back).strip()))
    return pairs


def _quiz_entries(data: Any) -> list:
    """Collect lesson "quiz" objects and "quizzes" lists from modules and lessons."""
    if isinstance(data, list):
        return [entry for item in data for entry in _quiz_entries(item)]
    if not isinstance(data, dict):
        return []
    entries = [data["quiz"]] if isinstance(data.get("quiz"), dict) else []
    entries.extend(data.get("quizzes") or [])
    for key in ("modules", "lessons"):
        entries.extend(_quiz_entries(data.get(key) or []))
    return entries


def parse_quizzes(data: Any) -> list[Quiz]:
    quizzes = []
    for entry in _quiz_entries(data):
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed quiz: {!r}", entry)
            continue
        question = entry.get("question")
        options = [str(o).strip() for o in entry.get("options") or []]
        answer = str(entry.get("answer") or "").strip()
        if not question or answer.lower() not in [o.lower() for o in options]:
            logger.warning("Skipping quiz without question or matching answer: {!r}", entry)
            continue
        quizzes.append(Quiz(question=str(question).strip(), options=options, answer=answer))
    return quizzes


def import_content(db_path: str, course_id: str, file_path: str, now: Optional[datetime] = None) -> dict:
    """Import a generated JSON/YAML file's flashcards and quizzes into a course."""
    data = read_content(file_path)
    flashcards = create_flashcards(db_path, course_id, parse_flashcards(data), now)
    quizzes = create_quizzes(db_path, course_id, parse_quizzes(data))
    logger.info("Imported {} flashcards and {} quizzes from {}", flashcards, quizzes, Path(file_path).name)
    return {"filename": Path(file_path).name, "course_id": course_id, "flashcards": flashcards, "quizzes": quizzes}
