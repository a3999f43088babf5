"""Challenge submission lifecycle: pending -> approved | rejected."""
from __future__ import annotations

import logging
from typing import List, Optional

from app.common.errors import Conflict, EcoError, NotFound, PolicyViolation, ValidationFailed
from app.common.schemas import utcnow
from app.common.utils import new_id
from app.db.storage import Storage
from app.features.accounts.schemas import REVIEWER_ROLES, User, UserRole
from app.features.progress.service import ProgressService
from app.features.submissions.schemas import (
    ChallengeDisplayStatus,
    ChallengeStatusResponse,
    ChallengeSubmission,
    ReviewResult,
    SubmissionStatus,
)

logger = logging.getLogger("submissions.service")


def _newest_first(items: List[ChallengeSubmission]) -> List[ChallengeSubmission]:
    # equal timestamps: the later-stored record counts as newer
    ranked = sorted(enumerate(items), key=lambda pair: (pair[1].submitted_at, pair[0]), reverse=True)
    return [item for _, item in ranked]


class SubmissionsService:
    def __init__(self, storage: Storage, progress: Optional[ProgressService] = None) -> None:
        self.storage = storage
        self.progress = progress or ProgressService(storage)

    async def create(
        self,
        user: User,
        challenge_id: str,
        description: str,
        photo_url: Optional[str] = None,
    ) -> ChallengeSubmission:
        challenge = self.storage.challenges.find(challenge_id)
        if challenge is None:
            raise NotFound("Challenge not found")
        description = (description or "").strip()
        if not description:
            raise ValidationFailed("Please describe how you completed the challenge")
        photo_url = (photo_url or "").strip() or None
        if challenge.verification_required and not photo_url:
            raise ValidationFailed("Please upload a photo or document as proof of completion")

        # Resubmission is only offered after a rejection
        current = await self.status_for(user.id, challenge.id)
        if current.status in (ChallengeDisplayStatus.pending, ChallengeDisplayStatus.approved):
            raise Conflict(f"You already have a {current.status.value} submission for this challenge")

        submission = ChallengeSubmission(
            id=new_id("submission"),
            challenge_id=challenge.id,
            user_id=user.id,
            user_name=user.name,
            school_id=user.school_id,
            description=description,
            photo_url=photo_url,
        )
        await self.storage.submissions.upsert(submission)
        logger.info("submission_created id=%s user_id=%s challenge_id=%s", submission.id, user.id, challenge.id)
        return submission

    async def get(self, submission_id: str) -> ChallengeSubmission:
        submission = await self.storage.submissions.get_by_id(submission_id)
        if submission is None:
            raise NotFound("Submission not found")
        return submission

    def _ensure_reviewer(self, reviewer: User, submission: ChallengeSubmission) -> None:
        if reviewer.role not in REVIEWER_ROLES:
            raise PolicyViolation("Only teachers or admins can review submissions")
        if reviewer.role is not UserRole.super_admin and reviewer.school_id != submission.school_id:
            raise PolicyViolation("You can only review submissions from your own school")

    async def approve(self, submission_id: str, reviewer: User) -> ReviewResult:
        submission = await self.get(submission_id)
        self._ensure_reviewer(reviewer, submission)
        if submission.status is SubmissionStatus.rejected:
            raise PolicyViolation("This submission has already been rejected", code="E_TERMINAL")
        if submission.status is SubmissionStatus.pending:
            submission.status = SubmissionStatus.approved
            submission.verified_by = reviewer.id
            submission.verified_at = utcnow()
            await self.storage.submissions.upsert(submission)
            logger.info("submission_approved id=%s reviewer_id=%s", submission.id, reviewer.id)

        # Status is already persisted; a failed cascade is logged and can be re-run
        try:
            outcome = await self.progress.complete_challenge(submission.user_id, submission.challenge_id)
        except EcoError as exc:
            logger.error("approval_cascade_failed id=%s error=%s", submission.id, exc.message)
            return ReviewResult(submission=submission)
        return ReviewResult(
            submission=submission,
            points_awarded=outcome.points_awarded,
            badges_awarded=outcome.badges_awarded,
            completed=outcome.completed,
        )

    async def reject(self, submission_id: str, reviewer: User) -> ReviewResult:
        submission = await self.get(submission_id)
        self._ensure_reviewer(reviewer, submission)
        if submission.is_terminal:
            raise PolicyViolation(f"This submission has already been {submission.status.value}", code="E_TERMINAL")
        submission.status = SubmissionStatus.rejected
        submission.verified_by = reviewer.id
        submission.verified_at = utcnow()
        await self.storage.submissions.upsert(submission)
        logger.info("submission_rejected id=%s reviewer_id=%s", submission.id, reviewer.id)
        return ReviewResult(submission=submission)

    async def list_for_user(self, user_id: str) -> List[ChallengeSubmission]:
        return _newest_first(await self.storage.submissions.get_where("user_id", user_id))

    async def list_for_school(
        self,
        school_id: Optional[str],
        status: Optional[SubmissionStatus] = None,
    ) -> List[ChallengeSubmission]:
        items = await self.storage.submissions.get_all()
        if school_id:
            items = [s for s in items if s.school_id == school_id]
        if status is not None:
            items = [s for s in items if s.status is status]
        return _newest_first(items)

    async def status_for(self, user_id: str, challenge_id: str) -> ChallengeStatusResponse:
        mine = [s for s in await self.list_for_user(user_id) if s.challenge_id == challenge_id]
        if not mine:
            return ChallengeStatusResponse(
                challenge_id=challenge_id, user_id=user_id, status=ChallengeDisplayStatus.not_attempted
            )
        latest = mine[0]
        return ChallengeStatusResponse(
            challenge_id=challenge_id,
            user_id=user_id,
            status=ChallengeDisplayStatus(latest.status.value),
            submission_id=latest.id,
        )
