"""Seed the database with the badge catalog."""
from edusagar.badges import BADGE_CATALOG
from edusagar.db import get_connection


def is_seeded(db_path: str) -> bool:
    """Check whether the badge catalog has been written."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM badges").fetchone()[0]
    conn.close()
    return count > 0


def seed_badges(db_path: str) -> None:
    """Write every catalog badge, refreshing names and descriptions."""
    conn = get_connection(db_path)
    for badge in BADGE_CATALOG.values():
        conn.execute(
            """INSERT INTO badges (id, name, description, icon) VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET name=excluded.name, description=excluded.description, icon=excluded.icon""",
            (badge.id, badge.name, badge.description, badge.icon),
        )
    conn.commit()
    conn.close()


def seed_all(db_path: str) -> None:
    seed_badges(db_path)
