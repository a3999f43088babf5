from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from app.common.schemas import EcoModel
from app.features.accounts.schemas import PublicUser
from app.features.progress.badges import Badge


class ProgressResult(EcoModel):
    """Outcome of a completion event; ``completed`` is False when it was already recorded."""
    user: PublicUser
    completed: bool
    points_awarded: int = 0
    badges_awarded: List[str] = Field(default_factory=list)


class QuizAnswers(EcoModel):
    answers: List[int] = Field(default_factory=list)


class QuizResult(ProgressResult):
    quiz_id: str
    score: int
    passed: bool
    passing_score: int


class PointsGrant(EcoModel):
    points: int = Field(..., ge=0)


class BadgeGrant(EcoModel):
    badge_id: str


class LevelInfo(EcoModel):
    level: int
    name: str
    min_points: int


class ProgressSummary(EcoModel):
    user_id: str
    eco_points: int
    level: int
    level_name: str
    next_level: Optional[LevelInfo] = None
    points_to_next_level: int
    badges: List[Badge]
    completed_lessons: List[str]
    completed_quizzes: List[str]
    completed_challenges: List[str]


class LeaderboardEntry(EcoModel):
    rank: int
    user_id: str
    user_name: str
    school_id: str
    school_name: str
    class_grade: Optional[str] = None
    eco_points: int
    level: int
    badge_count: int
