"""Progress endpoints: completions, quiz attempts, leaderboard and reference tables."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.common.deps import get_current_user, get_progress_service, require_role, require_super_admin
from app.common.errors import NotFound
from app.features.accounts.schemas import PublicUser, User, UserRole
from app.features.progress.badges import BADGES, Badge
from app.features.progress.levels import ECO_LEVELS
from app.features.progress.schemas import (
    BadgeGrant,
    LeaderboardEntry,
    LevelInfo,
    PointsGrant,
    ProgressResult,
    ProgressSummary,
    QuizAnswers,
    QuizResult,
)
from app.features.progress.service import ProgressService

router = APIRouter(prefix="/progress", tags=["progress"])

_student = require_role(UserRole.student)


@router.get("/me", response_model=ProgressSummary)
async def my_progress(
    current: User = Depends(get_current_user),
    progress: ProgressService = Depends(get_progress_service),
) -> ProgressSummary:
    return await progress.get_progress(current.id)


@router.post("/lessons/{lesson_id}/complete", response_model=ProgressResult)
async def complete_lesson(
    lesson_id: str,
    current: User = Depends(_student),
    progress: ProgressService = Depends(get_progress_service),
) -> ProgressResult:
    return await progress.complete_lesson(current.id, lesson_id)


@router.post("/quizzes/{quiz_id}/submit", response_model=QuizResult)
async def submit_quiz(
    quiz_id: str,
    payload: QuizAnswers,
    current: User = Depends(_student),
    progress: ProgressService = Depends(get_progress_service),
) -> QuizResult:
    return await progress.submit_quiz(current.id, quiz_id, payload.answers)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def leaderboard(
    school_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    _: User = Depends(get_current_user),
    progress: ProgressService = Depends(get_progress_service),
) -> List[LeaderboardEntry]:
    return await progress.leaderboard(school_id=school_id, limit=limit)


@router.get("/badges", response_model=List[Badge])
async def list_badges() -> List[Badge]:
    return BADGES


@router.get("/levels", response_model=List[LevelInfo])
async def list_levels() -> List[LevelInfo]:
    return [LevelInfo(level=t.level, name=t.name, min_points=t.min_points) for t in ECO_LEVELS]


@router.post("/users/{user_id}/points", response_model=PublicUser)
async def award_points(
    user_id: str,
    payload: PointsGrant,
    _: User = Depends(require_super_admin()),
    progress: ProgressService = Depends(get_progress_service),
) -> PublicUser:
    user = await progress.award_points(user_id, payload.points)
    if user is None:
        raise NotFound("User not found")
    return PublicUser.from_user(user)


@router.post("/users/{user_id}/badges", response_model=PublicUser)
async def grant_badge(
    user_id: str,
    payload: BadgeGrant,
    _: User = Depends(require_super_admin()),
    progress: ProgressService = Depends(get_progress_service),
) -> PublicUser:
    user = await progress.grant_badge(user_id, payload.badge_id)
    if user is None:
        raise NotFound("User not found")
    return PublicUser.from_user(user)
