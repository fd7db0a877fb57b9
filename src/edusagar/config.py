"""Reward rules and application settings."""
from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = str(Path.home() / ".edusagar" / "edusagar.db")


@dataclass(frozen=True)
class RewardConfig:
    """Point values, thresholds and multipliers for the rewards engine."""

    # Base points per activity
    lesson_complete: int = 10
    quiz_correct: int = 5
    module_complete: int = 50
    course_complete: int = 200
    flashcard_review: int = 2

    weekly_threshold: int = 100
    weekly_bonus: int = 50
    monthly_threshold: int = 500
    monthly_bonus: int = 300

    # (minimum streak, multiplier), highest first
    streak_multipliers: tuple[tuple[int, float], ...] = (
        (30, 1.5),
        (7, 1.25),
        (3, 1.1),
    )

    scholar_points: int = 500
    top_learner_points: int = 1000
    streak_star_days: int = 5


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EDUSAGAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: str = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    log_level: str = Field(default="WARNING", description="Minimum level for the stderr log sink")
    user_id: str = Field(default="local", description="Profile used by the terminal app")
    user_name: str = Field(default="Learner", description="Display name for a new local profile")

    weekly_threshold: int | None = Field(default=None, description="Override weekly bonus threshold")
    weekly_bonus: int | None = Field(default=None, description="Override weekly bonus amount")
    monthly_threshold: int | None = Field(default=None, description="Override monthly bonus threshold")
    monthly_bonus: int | None = Field(default=None, description="Override monthly bonus amount")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def build_reward_config(settings: Settings) -> RewardConfig:
    """Apply any threshold overrides from settings to the default rules."""
    overrides = {
        name: getattr(settings, name)
        for name in ("weekly_threshold", "weekly_bonus", "monthly_threshold", "monthly_bonus")
        if getattr(settings, name) is not None
    }
    return replace(RewardConfig(), **overrides)
