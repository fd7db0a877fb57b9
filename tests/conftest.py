from datetime import datetime

import pytest
from loguru import logger

from edusagar.db import init_db
from edusagar.progress import create_user


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_edusagar.db")
    return db_path


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 12, 0)


@pytest.fixture
def user_db(tmp_db, now):
    """Initialized database holding one fresh user, 'u1'."""
    init_db(tmp_db)
    create_user(tmp_db, "u1", "Asha", now=now)
    return tmp_db


@pytest.fixture
def log_messages():
    """Capture loguru output as plain strings."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(str(m)), format="{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)
