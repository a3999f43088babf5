# app/features/submissions/endpoints.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from app.common.deps import get_submissions_service, require_reviewer, require_role
from app.features.accounts.schemas import User, UserRole
from app.features.submissions.schemas import (
    ChallengeStatusResponse,
    ChallengeSubmission,
    ReviewResult,
    SubmissionCreate,
    SubmissionStatus,
)
from app.features.submissions.service import SubmissionsService

logger = logging.getLogger("submissions")

router = APIRouter(prefix="/submissions", tags=["submissions"])

_student = require_role(UserRole.student)


@router.post("", response_model=ChallengeSubmission, status_code=status.HTTP_201_CREATED)
async def create_submission(
    payload: SubmissionCreate,
    current: User = Depends(_student),
    submissions: SubmissionsService = Depends(get_submissions_service),
) -> ChallengeSubmission:
    return await submissions.create(current, payload.challenge_id, payload.description, payload.photo_url)


@router.get("/mine", response_model=List[ChallengeSubmission])
async def my_submissions(
    current: User = Depends(_student),
    submissions: SubmissionsService = Depends(get_submissions_service),
) -> List[ChallengeSubmission]:
    return await submissions.list_for_user(current.id)


@router.get("/status/{challenge_id}", response_model=ChallengeStatusResponse)
async def challenge_status(
    challenge_id: str,
    current: User = Depends(_student),
    submissions: SubmissionsService = Depends(get_submissions_service),
) -> ChallengeStatusResponse:
    return await submissions.status_for(current.id, challenge_id)


@router.get("/queue", response_model=List[ChallengeSubmission])
async def review_queue(
    status_filter: Optional[SubmissionStatus] = SubmissionStatus.pending,
    school_id: Optional[str] = None,
    reviewer: User = Depends(require_reviewer()),
    submissions: SubmissionsService = Depends(get_submissions_service),
) -> List[ChallengeSubmission]:
    """Submissions awaiting review; super-admins may look at any school."""
    if reviewer.role is not UserRole.super_admin:
        school_id = reviewer.school_id
    return await submissions.list_for_school(school_id, status_filter)


@router.post("/{submission_id}/approve", response_model=ReviewResult)
async def approve_submission(
    submission_id: str,
    reviewer: User = Depends(require_reviewer()),
    submissions: SubmissionsService = Depends(get_submissions_service),
) -> ReviewResult:
    result = await submissions.approve(submission_id, reviewer)
    logger.info("approve_endpoint id=%s points=%d", submission_id, result.points_awarded)
    return result


@router.post("/{submission_id}/reject", response_model=ReviewResult)
async def reject_submission(
    submission_id: str,
    reviewer: User = Depends(require_reviewer()),
    submissions: SubmissionsService = Depends(get_submissions_service),
) -> ReviewResult:
    return await submissions.reject(submission_id, reviewer)
