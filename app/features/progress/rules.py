"""Point and badge rules.

Pure functions over an in-memory ``User``; callers persist the result.
Threshold checks take the completed-count *before* the triggering event.
"""
from __future__ import annotations

from typing import List, Sequence

from app.features.accounts.schemas import User
from app.features.content.schemas import Quiz
from app.features.progress.badges import (
    CHALLENGE_BADGES,
    CHALLENGE_HERO,
    FIRST_CHALLENGE,
    FIRST_LESSON,
    LESSON_MASTER,
    QUIZ_MASTER,
)
from app.features.progress.levels import calculate_level

LESSON_MASTER_COUNT = 5
QUIZ_MASTER_COUNT = 3
QUIZ_MASTER_SCORE = 80
CHALLENGE_HERO_COUNT = 5


def apply_points(user: User, points: int) -> User:
    if points < 0:
        raise ValueError("points can only be added")
    user.eco_points += points
    user.level = calculate_level(user.eco_points)
    return user


def grant_badges(user: User, badge_ids: Sequence[str]) -> List[str]:
    """Add each badge not yet held; returns the newly granted ids."""
    return [badge_id for badge_id in badge_ids if user.add_badge(badge_id)]


def lesson_badges(prior_count: int) -> List[str]:
    badges: List[str] = []
    if prior_count == 0:
        badges.append(FIRST_LESSON)
    if prior_count + 1 >= LESSON_MASTER_COUNT:
        badges.append(LESSON_MASTER)
    return badges


def quiz_badges(prior_count: int, score: int) -> List[str]:
    # Only the triggering quiz's score is checked, not the earlier passes
    if prior_count + 1 >= QUIZ_MASTER_COUNT and score >= QUIZ_MASTER_SCORE:
        return [QUIZ_MASTER]
    return []


def challenge_badges(prior_count: int, challenge_id: str) -> List[str]:
    badges: List[str] = []
    if prior_count == 0:
        badges.append(FIRST_CHALLENGE)
    if prior_count + 1 >= CHALLENGE_HERO_COUNT:
        badges.append(CHALLENGE_HERO)
    themed = CHALLENGE_BADGES.get(challenge_id)
    if themed:
        badges.append(themed)
    return badges


def score_quiz(quiz: Quiz, answers: Sequence[int]) -> int:
    """Percentage of correct answers, rounded half-up; unanswered questions count as wrong."""
    total = len(quiz.questions)
    if total == 0:
        return 0
    correct = sum(
        1
        for idx, question in enumerate(quiz.questions)
        if idx < len(answers) and answers[idx] == question.correct_answer
    )
    # integer half-up rounding
    return (correct * 200 + total) // (total * 2)


def grant_badge(user: User, badge_id: str) -> bool:
    return user.add_badge(badge_id)
