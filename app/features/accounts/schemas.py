"""Pydantic models for accounts, admin codes and the activity log."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from app.common.schemas import EcoModel, UtcDateTime, utcnow
from app.features.progress.levels import calculate_level


class UserRole(str, Enum):
    student = "student"
    teacher = "teacher"
    admin = "admin"
    super_admin = "super_admin"


class AccountStatus(str, Enum):
    active = "active"
    pending = "pending"
    disabled = "disabled"


class ContentKind(str, Enum):
    lesson = "lesson"
    quiz = "quiz"
    challenge = "challenge"


REVIEWER_ROLES = frozenset({UserRole.teacher, UserRole.admin, UserRole.super_admin})
MODERATOR_ROLES = frozenset({UserRole.admin, UserRole.super_admin})

PLATFORM_SCHOOL_ID = "ecolearn-platform"
PLATFORM_SCHOOL_NAME = "EcoLearn Platform"


def unique_ids(values: Optional[Iterable[Any]]) -> List[str]:
    """Order-preserving de-duplication; the persisted form of an id set."""
    seen: set[str] = set()
    out: List[str] = []
    for value in values or []:
        item = str(value)
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class User(EcoModel):
    """Identity plus progress aggregate.

    ``badges`` and the ``completed_*`` lists have set semantics: they are
    de-duplicated on load and only ever grow through ``add_badge`` /
    ``mark_completed``.
    """
    id: str
    name: str
    email: str
    password: str = ""
    role: UserRole
    school_id: str = ""
    school_name: str = ""
    class_grade: Optional[str] = None
    avatar_url: Optional[str] = None
    status: AccountStatus = AccountStatus.active
    eco_points: int = Field(0, ge=0)
    level: int = 1
    badges: List[str] = Field(default_factory=list)
    completed_lessons: List[str] = Field(default_factory=list)
    completed_quizzes: List[str] = Field(default_factory=list)
    completed_challenges: List[str] = Field(default_factory=list)
    created_at: UtcDateTime = Field(default_factory=utcnow)

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, value: Any) -> Any:
        # Records written before moderation existed carry no status
        return value or AccountStatus.active

    @field_validator("password", "school_id", "school_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("eco_points", mode="before")
    @classmethod
    def _points_default(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("badges", "completed_lessons", "completed_quizzes", "completed_challenges", mode="before")
    @classmethod
    def _as_id_set(cls, value: Any) -> List[str]:
        return unique_ids(value)

    @model_validator(mode="after")
    def _derive_level(self) -> "User":
        self.level = calculate_level(self.eco_points)
        return self

    @property
    def is_super_admin(self) -> bool:
        return self.role is UserRole.super_admin

    def completed(self, kind: ContentKind) -> List[str]:
        if kind is ContentKind.lesson:
            return self.completed_lessons
        if kind is ContentKind.quiz:
            return self.completed_quizzes
        if kind is ContentKind.challenge:
            return self.completed_challenges
        raise ValueError(f"unknown content kind: {kind!r}")

    def mark_completed(self, kind: ContentKind, item_id: str) -> bool:
        items = self.completed(kind)
        if item_id in items:
            return False
        items.append(item_id)
        return True

    def in_school(self, school_id: str, school_name: str) -> bool:
        """Same school by id, or by case-insensitive name for ids minted elsewhere."""
        if school_id and self.school_id == school_id:
            return True
        return bool(school_name) and self.school_name.strip().lower() == school_name.strip().lower()

    def add_badge(self, badge_id: str) -> bool:
        if badge_id in self.badges:
            return False
        self.badges.append(badge_id)
        return True


class PublicUser(EcoModel):
    """User as returned over HTTP (no password hash)."""
    id: str
    name: str
    email: str
    role: UserRole
    school_id: str
    school_name: str
    class_grade: Optional[str] = None
    avatar_url: Optional[str] = None
    status: AccountStatus
    eco_points: int
    level: int
    badges: List[str]
    completed_lessons: List[str]
    completed_quizzes: List[str]
    completed_challenges: List[str]
    created_at: UtcDateTime

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(**user.model_dump(exclude={"password"}))


class AdminCode(EcoModel):
    id: str
    code: str
    school_id: str
    school_name: str
    is_used: bool = False
    created_at: UtcDateTime = Field(default_factory=utcnow)
    used_at: Optional[UtcDateTime] = None


class ActivityLogEntry(EcoModel):
    id: str
    timestamp: UtcDateTime = Field(default_factory=utcnow)
    action: str
    actor_id: str
    actor_name: str
    actor_role: UserRole
    target_user_id: Optional[str] = None
    target_user_name: Optional[str] = None
    details: Optional[str] = None


class SchoolSummary(EcoModel):
    school_id: str
    school_name: str
    user_count: int


# ---- Requests / responses --------------------------------------------------

class RegisterRequest(EcoModel):
    name: str = ""
    email: EmailStr
    password: str = ""
    confirm_password: Optional[str] = None
    role: UserRole = UserRole.student
    school_name: str = ""
    class_grade: Optional[str] = None
    admin_code: Optional[str] = None


class LoginRequest(EcoModel):
    email: str = ""
    password: str = ""


class LoginResponse(EcoModel):
    user: PublicUser
    redirect_to: str
    pending_approval: bool = False


class StatusUpdateRequest(EcoModel):
    status: AccountStatus


class AdminCodeRequest(EcoModel):
    school_name: str = ""


class GateResponse(EcoModel):
    destination: str
    allowed: bool
    redirect_to: Optional[str] = None


class ProfileUpdateRequest(EcoModel):
    name: str = ""
    school_name: str = ""
    class_grade: Optional[str] = None


class PasswordChangeRequest(EcoModel):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


class AvatarRequest(EcoModel):
    """``avatar_url`` of ``None`` removes the photo."""
    avatar_url: Optional[str] = None
