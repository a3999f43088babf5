"""Content endpoints: list/get for any logged-in user, write for teachers."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from app.common.deps import get_content_service, get_current_user, require_role
from app.common.errors import ValidationFailed
from app.common.schemas import StatusResponse
from app.features.accounts.schemas import ContentKind, User, UserRole
from app.features.content.schemas import Challenge, Lesson, Quiz
from app.features.content.service import ContentService

router = APIRouter(prefix="/content", tags=["content"], dependencies=[Depends(get_current_user)])

_editor = require_role(UserRole.teacher)


def _check_path_id(item_id: str, body_id: str) -> None:
    if item_id != body_id:
        raise ValidationFailed("Path id and body id differ")


# ---- lessons -----------------------------------------------------------------

@router.get("/lessons", response_model=List[Lesson])
async def list_lessons(content: ContentService = Depends(get_content_service)) -> List[Lesson]:
    return content.list(ContentKind.lesson)


@router.get("/lessons/{lesson_id}", response_model=Lesson)
async def get_lesson(lesson_id: str, content: ContentService = Depends(get_content_service)) -> Lesson:
    return content.get(ContentKind.lesson, lesson_id)


@router.post("/lessons", response_model=Lesson, status_code=status.HTTP_201_CREATED)
async def create_lesson(
    lesson: Lesson,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> Lesson:
    return content.save(actor, ContentKind.lesson, lesson)


@router.put("/lessons/{lesson_id}", response_model=Lesson)
async def update_lesson(
    lesson_id: str,
    lesson: Lesson,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> Lesson:
    _check_path_id(lesson_id, lesson.id)
    content.get(ContentKind.lesson, lesson_id)
    return content.save(actor, ContentKind.lesson, lesson)


@router.delete("/lessons/{lesson_id}", response_model=StatusResponse)
async def delete_lesson(
    lesson_id: str,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> StatusResponse:
    content.delete(actor, ContentKind.lesson, lesson_id)
    return StatusResponse(status="ok", message="Lesson deleted")


# ---- quizzes -----------------------------------------------------------------

@router.get("/quizzes", response_model=List[Quiz])
async def list_quizzes(content: ContentService = Depends(get_content_service)) -> List[Quiz]:
    return content.list(ContentKind.quiz)


@router.get("/quizzes/{quiz_id}", response_model=Quiz)
async def get_quiz(quiz_id: str, content: ContentService = Depends(get_content_service)) -> Quiz:
    return content.get(ContentKind.quiz, quiz_id)


@router.post("/quizzes", response_model=Quiz, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    quiz: Quiz,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> Quiz:
    return content.save(actor, ContentKind.quiz, quiz)


@router.put("/quizzes/{quiz_id}", response_model=Quiz)
async def update_quiz(
    quiz_id: str,
    quiz: Quiz,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> Quiz:
    _check_path_id(quiz_id, quiz.id)
    content.get(ContentKind.quiz, quiz_id)
    return content.save(actor, ContentKind.quiz, quiz)


@router.delete("/quizzes/{quiz_id}", response_model=StatusResponse)
async def delete_quiz(
    quiz_id: str,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> StatusResponse:
    content.delete(actor, ContentKind.quiz, quiz_id)
    return StatusResponse(status="ok", message="Quiz deleted")


# ---- challenges --------------------------------------------------------------

@router.get("/challenges", response_model=List[Challenge])
async def list_challenges(content: ContentService = Depends(get_content_service)) -> List[Challenge]:
    return content.list(ContentKind.challenge)


@router.get("/challenges/{challenge_id}", response_model=Challenge)
async def get_challenge(challenge_id: str, content: ContentService = Depends(get_content_service)) -> Challenge:
    return content.get(ContentKind.challenge, challenge_id)


@router.post("/challenges", response_model=Challenge, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    challenge: Challenge,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> Challenge:
    return content.save(actor, ContentKind.challenge, challenge)


@router.put("/challenges/{challenge_id}", response_model=Challenge)
async def update_challenge(
    challenge_id: str,
    challenge: Challenge,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> Challenge:
    _check_path_id(challenge_id, challenge.id)
    content.get(ContentKind.challenge, challenge_id)
    return content.save(actor, ContentKind.challenge, challenge)


@router.delete("/challenges/{challenge_id}", response_model=StatusResponse)
async def delete_challenge(
    challenge_id: str,
    actor: User = Depends(_editor),
    content: ContentService = Depends(get_content_service),
) -> StatusResponse:
    content.delete(actor, ContentKind.challenge, challenge_id)
    return StatusResponse(status="ok", message="Challenge deleted")
