from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from app.common.schemas import EcoModel, UtcDateTime, utcnow


class SubmissionStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ChallengeDisplayStatus(str, Enum):
    """Per user+challenge status shown to the student."""
    not_attempted = "not_attempted"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ChallengeSubmission(EcoModel):
    id: str
    challenge_id: str
    user_id: str
    user_name: str
    school_id: str = ""
    submitted_at: UtcDateTime = Field(default_factory=utcnow)
    description: str
    photo_url: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.pending
    verified_by: Optional[str] = None
    verified_at: Optional[UtcDateTime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not SubmissionStatus.pending


class SubmissionCreate(EcoModel):
    challenge_id: str
    description: str = ""
    photo_url: Optional[str] = None


class ChallengeStatusResponse(EcoModel):
    challenge_id: str
    user_id: str
    status: ChallengeDisplayStatus
    submission_id: Optional[str] = None


class ReviewResult(EcoModel):
    submission: ChallengeSubmission
    points_awarded: int = 0
    badges_awarded: List[str] = Field(default_factory=list)
    completed: bool = False
