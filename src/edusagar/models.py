"""Data classes for the progress and rewards domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

ACTIVITY_KINDS = (
    "lesson_complete",
    "module_complete",
    "course_complete",
    "quiz_correct",
    "flashcard_review",
)


@dataclass
class UserProgress:
    id: str
    name: str = ""
    total_points: int = 0
    weekly_points: int = 0
    streak: int = 0
    last_active_date: Optional[datetime] = None
    badges: list[str] = field(default_factory=list)
    wallet_address: Optional[str] = None
    week_started_at: Optional[datetime] = None


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str


@dataclass
class Flashcard:
    id: Optional[int]
    front: str
    back: str
    next_review_date: datetime
    interval: int = 0
    ease_factor: float = 2.5
    repetitions: int = 0
    course_id: Optional[str] = None


@dataclass(frozen=True)
class RewardEvent:
    kind: str
    base_points: int
    timestamp: datetime


@dataclass(frozen=True)
class StreakUpdate:
    new_streak: int
    streak_broken: bool


@dataclass(frozen=True)
class WeeklyRewardResult:
    weekly_points_earned: int
    bonus_awarded: bool
    new_weekly_points: int
    message: str


@dataclass(frozen=True)
class MonthlyRewardResult:
    monthly_points_earned: int
    bonus_awarded: bool
    new_monthly_points: int
    message: str


@dataclass(frozen=True)
class ActivityResult:
    """Outcome of recording one qualifying activity for a user."""
    points_earned: int
    total_points: int
    weekly_points: int
    streak: int
    streak_broken: bool
    new_badges: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Quiz:
    question: str
    options: list[str]
    answer: str
    id: Optional[int] = None
    course_id: Optional[str] = None
