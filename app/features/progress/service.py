"""Completion events and the point/badge cascade they trigger."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from app.common.errors import NotFound
from app.db.storage import Storage
from app.features.accounts.schemas import ContentKind, PublicUser, User, UserRole
from app.features.progress import rules
from app.features.progress.badges import resolve_badges
from app.features.progress.levels import get_level_name, next_level, points_to_next_level
from app.features.progress.schemas import (
    LeaderboardEntry,
    LevelInfo,
    ProgressResult,
    ProgressSummary,
    QuizResult,
)

logger = logging.getLogger("progress.service")


class ProgressService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    async def _load_user(self, user_id: str) -> User:
        user = await self.storage.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def _save(self, user: User) -> User:
        await self.storage.users.upsert(user)
        self.storage.session.refresh(user)
        return user

    def _record(self, user: User, kind: ContentKind, item_id: str, points: int, badges: List[str]) -> ProgressResult:
        """Apply one completion to ``user`` in memory; a repeat completion changes nothing."""
        if not user.mark_completed(kind, item_id):
            return ProgressResult(user=PublicUser.from_user(user), completed=False)
        rules.apply_points(user, points)
        granted = rules.grant_badges(user, badges)
        return ProgressResult(
            user=PublicUser.from_user(user),
            completed=True,
            points_awarded=points,
            badges_awarded=granted,
        )

    async def complete_lesson(self, user_id: str, lesson_id: str) -> ProgressResult:
        lesson = self.storage.lessons.find(lesson_id)
        if lesson is None:
            raise NotFound("Lesson not found")
        user = await self._load_user(user_id)
        prior = len(user.completed_lessons)
        result = self._record(user, ContentKind.lesson, lesson.id, lesson.eco_points, rules.lesson_badges(prior))
        if result.completed:
            await self._save(user)
            logger.info(
                "lesson_completed user_id=%s lesson_id=%s points=%d badges=%s",
                user.id, lesson.id, result.points_awarded, result.badges_awarded,
            )
        return result

    async def submit_quiz(self, user_id: str, quiz_id: str, answers: Sequence[int]) -> QuizResult:
        quiz = self.storage.quizzes.find(quiz_id)
        if quiz is None:
            raise NotFound("Quiz not found")
        user = await self._load_user(user_id)
        score = rules.score_quiz(quiz, answers)
        passed = score >= quiz.passing_score
        extra = {"quiz_id": quiz.id, "score": score, "passed": passed, "passing_score": quiz.passing_score}
        if not passed:
            logger.info("quiz_failed user_id=%s quiz_id=%s score=%d", user.id, quiz.id, score)
            return QuizResult(user=PublicUser.from_user(user), completed=False, **extra)

        prior = len(user.completed_quizzes)
        result = self._record(user, ContentKind.quiz, quiz.id, quiz.eco_points, rules.quiz_badges(prior, score))
        if result.completed:
            await self._save(user)
            logger.info("quiz_passed user_id=%s quiz_id=%s score=%d badges=%s", user.id, quiz.id, score, result.badges_awarded)
        return QuizResult(**result.model_dump(), **extra)

    async def complete_challenge(self, user_id: str, challenge_id: str) -> ProgressResult:
        """Approval cascade for one challenge; safe to re-run."""
        challenge = self.storage.challenges.find(challenge_id)
        if challenge is None:
            raise NotFound("Challenge not found")
        user = await self._load_user(user_id)
        prior = len(user.completed_challenges)
        result = self._record(
            user,
            ContentKind.challenge,
            challenge.id,
            challenge.eco_points,
            rules.challenge_badges(prior, challenge.id),
        )
        if result.completed:
            await self._save(user)
            logger.info(
                "challenge_completed user_id=%s challenge_id=%s points=%d badges=%s",
                user.id, challenge.id, result.points_awarded, result.badges_awarded,
            )
        return result

    async def award_points(self, user_id: str, points: int) -> Optional[User]:
        user = await self.storage.users.get_by_id(user_id)
        if user is None:
            logger.info("award_points skipped, user_id=%s not found", user_id)
            return None
        rules.apply_points(user, points)
        return await self._save(user)

    async def grant_badge(self, user_id: str, badge_id: str) -> Optional[User]:
        user = await self.storage.users.get_by_id(user_id)
        if user is None:
            logger.info("grant_badge skipped, user_id=%s not found", user_id)
            return None
        if rules.grant_badge(user, badge_id):
            await self._save(user)
        return user

    async def get_progress(self, user_id: str) -> ProgressSummary:
        user = await self._load_user(user_id)
        upcoming = next_level(user.eco_points)
        return ProgressSummary(
            user_id=user.id,
            eco_points=user.eco_points,
            level=user.level,
            level_name=get_level_name(user.level),
            next_level=LevelInfo(level=upcoming.level, name=upcoming.name, min_points=upcoming.min_points)
            if upcoming
            else None,
            points_to_next_level=points_to_next_level(user.eco_points),
            badges=resolve_badges(user.badges),
            completed_lessons=user.completed_lessons,
            completed_quizzes=user.completed_quizzes,
            completed_challenges=user.completed_challenges,
        )

    async def leaderboard(self, *, school_id: Optional[str] = None, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        students = [u for u in await self.storage.users.get_all() if u.role is UserRole.student]
        if school_id:
            students = [u for u in students if u.school_id == school_id]
        students.sort(key=lambda u: u.eco_points, reverse=True)
        if limit:
            students = students[:limit]
        return [
            LeaderboardEntry(
                rank=idx,
                user_id=u.id,
                user_name=u.name,
                school_id=u.school_id,
                school_name=u.school_name,
                class_grade=u.class_grade,
                eco_points=u.eco_points,
                level=u.level,
                badge_count=len(u.badges),
            )
            for idx, u in enumerate(students, start=1)
        ]
