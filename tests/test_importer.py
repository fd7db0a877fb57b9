# tests/test_importer.py
import json

from edusagar.db import init_db
from edusagar.flashcards import get_flashcards
from edusagar.importer import import_content, parse_flashcards, parse_quizzes, read_content
from edusagar.quiz import get_quizzes


def test_read_json_file(tmp_path):
    f = tmp_path / "module.json"
    f.write_text('{"flashcards": [{"front": "Q", "back": "A"}]}')
    assert read_content(str(f))["flashcards"][0]["front"] == "Q"


def test_read_yaml_file(tmp_path):
    f = tmp_path / "module.yaml"
    f.write_text("flashcards:\n  - front: Q\n    back: A\n")
    assert read_content(str(f)) == {"flashcards": [{"front": "Q", "back": "A"}]}


def test_parse_bare_list():
    assert parse_flashcards([{"front": " Q1 ", "back": "A1"}]) == [("Q1", "A1")]


def test_parse_nested_modules():
    course = {
        "title": "Biology",
        "flashcards": [{"front": "Cell?", "back": "Unit of life"}],
        "modules": [
            {"title": "Plants", "flashcards": [{"front": "Chlorophyll?", "back": "Green pigment"}]},
            {"title": "Empty"},
        ],
    }
    assert parse_flashcards(course) == [
        ("Cell?", "Unit of life"),
        ("Chlorophyll?", "Green pigment"),
    ]


def test_parse_skips_incomplete_cards(log_messages):
    data = {"flashcards": [{"front": "Q"}, "junk", {"front": "Q2", "back": "A2"}]}
    assert parse_flashcards(data) == [("Q2", "A2")]
    assert sum("Skipping flashcard" in m for m in log_messages) == 2


def test_parse_unexpected_payload():
    assert parse_flashcards("not cards") == []


COURSE = {
    "title": "Biology",
    "modules": [
        {
            "title": "Plants",
            "flashcards": [{"front": "Chlorophyll?", "back": "Green pigment"}],
            "lessons": [
                {
                    "title": "Photosynthesis",
                    "quiz": {
                        "question": "Which gas do plants absorb?",
                        "options": ["Oxygen", "Carbon dioxide", "Nitrogen", "Helium"],
                        "answer": "Carbon dioxide",
                    },
                },
                {"title": "Roots"},
            ],
        },
    ],
    "quizzes": [{"question": "Unit of life?", "options": ["Cell", "Atom"], "answer": "cell"}],
}


def test_parse_quizzes_from_lessons_and_lists():
    quizzes = parse_quizzes(COURSE)
    assert [q.question for q in quizzes] == ["Unit of life?", "Which gas do plants absorb?"]
    assert quizzes[1].options[1] == "Carbon dioxide"
    assert quizzes[1].answer == "Carbon dioxide"


def test_parse_quizzes_skips_unanswerable(log_messages):
    data = {"quizzes": [
        {"question": "Q?", "options": ["a", "b"], "answer": "c"},
        {"options": ["a"], "answer": "a"},
        "junk",
        {"question": "Ok?", "options": ["yes", "no"], "answer": "yes"},
    ]}
    assert [q.question for q in parse_quizzes(data)] == ["Ok?"]
    assert sum("Skipping" in m and "quiz" in m for m in log_messages) == 3


def test_import_content(tmp_path, tmp_db, now):
    init_db(tmp_db)
    f = tmp_path / "bio.json"
    f.write_text(json.dumps(COURSE))
    result = import_content(tmp_db, "bio-101", str(f), now)
    assert result == {"filename": "bio.json", "course_id": "bio-101", "flashcards": 1, "quizzes": 2}
    cards = get_flashcards(tmp_db, "bio-101")
    assert [c.front for c in cards] == ["Chlorophyll?"]
    assert all(c.next_review_date == now for c in cards)
    assert len(get_quizzes(tmp_db, "bio-101")) == 2


def test_import_flashcards_only(tmp_path, tmp_db, now):
    init_db(tmp_db)
    f = tmp_path / "bio.yaml"
    f.write_text("flashcards:\n  - front: DNA?\n    back: Genetic code\n")
    result = import_content(tmp_db, "bio-101", str(f), now)
    assert result["flashcards"] == 1
    assert result["quizzes"] == 0
