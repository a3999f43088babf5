"""Registration, login and moderation of user accounts."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from app.common.errors import AuthenticationFailed, Conflict, NotFound, PolicyViolation, ValidationFailed
from app.common.security import hash_password, verify_password
from app.common.utils import epoch_millis, new_id, slugify
from app.db.storage import Storage
from app.features.accounts.activity import ActivityAction, ActivityLog
from app.features.accounts.admin_codes import AdminCodeRegistry
from app.features.accounts.policy import check_login_allowed, ensure_can_manage, is_pending_gated, login_destination
from app.features.accounts.schemas import (
    PLATFORM_SCHOOL_ID,
    PLATFORM_SCHOOL_NAME,
    AccountStatus,
    LoginResponse,
    PublicUser,
    RegisterRequest,
    SchoolSummary,
    User,
    UserRole,
)

logger = logging.getLogger("accounts.service")

MIN_PASSWORD_LENGTH = 6
MAX_AVATAR_BYTES = 2 * 1024 * 1024

_STATUS_ACTIONS: Dict[AccountStatus, str] = {
    AccountStatus.active: ActivityAction.ACTIVATE_USER,
    AccountStatus.disabled: ActivityAction.DISABLE_USER,
}


class AccountsService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self.activity = ActivityLog(storage)
        self.admin_codes = AdminCodeRegistry(storage)

    # ---- lookups ---------------------------------------------------------

    async def find_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        for user in await self.storage.users.get_all():
            if user.email.lower() == wanted:
                return user
        return None

    async def get_user(self, user_id: str) -> User:
        user = await self.storage.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def _existing_school_id(self, school_name: str) -> Optional[str]:
        for user in await self.storage.users.get_all():
            if user.school_id and user.school_id != PLATFORM_SCHOOL_ID and user.in_school("", school_name):
                return user.school_id
        return None

    async def _resolve_school_id(self, school_name: str) -> str:
        existing = await self._existing_school_id(school_name)
        return existing or f"school-{epoch_millis()}-{slugify(school_name)}"

    # ---- registration / session -------------------------------------------

    def _validate_registration(self, payload: RegisterRequest) -> None:
        if not payload.name.strip() or not payload.password or not payload.school_name.strip():
            raise ValidationFailed("Please fill in all required fields")
        if len(payload.password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed("Password must be at least 6 characters long")
        if payload.confirm_password is not None and payload.confirm_password != payload.password:
            raise ValidationFailed("Passwords do not match")
        if payload.role is UserRole.student and not (payload.class_grade or "").strip():
            raise ValidationFailed("Please select your class/grade")
        if payload.role is UserRole.admin and not (payload.admin_code or "").strip():
            raise ValidationFailed("Please enter the 5-digit admin code provided by the super admin")
        if payload.role is UserRole.super_admin:
            raise PolicyViolation("Super admin accounts cannot be registered.")

    async def register(self, payload: RegisterRequest) -> LoginResponse:
        self._validate_registration(payload)
        email = str(payload.email).strip().lower()
        if await self.find_by_email(email) is not None:
            raise Conflict("An account with this email already exists")

        school_name = payload.school_name.strip()
        admin_code = None
        if payload.role is UserRole.admin:
            admin_code = self.admin_codes.find(payload.admin_code or "")
            if admin_code is None:
                raise ValidationFailed("Invalid admin code. Please contact the super admin.")
            if admin_code.is_used:
                raise Conflict(
                    "This admin code has already been used. Only one admin account is allowed per school."
                )
            if admin_code.school_name.lower() != school_name.lower():
                raise ValidationFailed(
                    f"School name does not match this admin code. Expected: {admin_code.school_name}"
                )
            for existing in await self.storage.users.get_all():
                if existing.role is UserRole.admin and existing.in_school(admin_code.school_id, admin_code.school_name):
                    raise Conflict("An admin account already exists for this school.")
            # join the school as other users already know it
            school_name = admin_code.school_name
            school_id = await self._existing_school_id(school_name) or admin_code.school_id
        else:
            school_id = await self._resolve_school_id(school_name)

        user = User(
            id=new_id("user"),
            name=payload.name.strip(),
            email=email,
            password=hash_password(payload.password),
            role=payload.role,
            school_id=school_id,
            school_name=school_name,
            class_grade=(payload.class_grade or "").strip() if payload.role is UserRole.student else None,
            status=AccountStatus.pending if payload.role is UserRole.teacher else AccountStatus.active,
        )
        await self.storage.users.upsert(user)
        if admin_code is not None:
            self.admin_codes.mark_used(admin_code)
        logger.info("register user_id=%s role=%s school_id=%s", user.id, user.role.value, user.school_id)

        self.storage.session.start(user)
        return LoginResponse(
            user=PublicUser.from_user(user),
            redirect_to=login_destination(user),
            pending_approval=is_pending_gated(user),
        )

    async def login(self, email: str, password: str) -> LoginResponse:
        if not (email or "").strip() or not password:
            raise ValidationFailed("Please enter both email and password")
        user = await self.find_by_email(email)
        if user is None:
            raise AuthenticationFailed("Invalid email or password")
        if not user.password:
            raise AuthenticationFailed("Please reset your password or contact support")
        if not verify_password(password, user.password):
            raise AuthenticationFailed("Invalid email or password")
        check_login_allowed(user)

        self.storage.session.start(user)
        return LoginResponse(
            user=PublicUser.from_user(user),
            redirect_to=login_destination(user),
            pending_approval=is_pending_gated(user),
        )

    def logout(self) -> None:
        self.storage.session.end()

    async def current_user(self) -> Optional[User]:
        """Session user re-read from storage; a vanished or disabled account ends the session."""
        cached = self.storage.session.current()
        if cached is None:
            return None
        fresh = await self.storage.users.get_by_id(cached.id)
        if fresh is None or fresh.status is AccountStatus.disabled:
            self.storage.session.end()
            return None
        self.storage.session.refresh(fresh)
        return fresh

    # ---- own profile ------------------------------------------------------

    async def _save_own(self, user: User, event: str) -> User:
        await self.storage.users.upsert(user)
        self.storage.session.refresh(user)
        logger.info("%s user_id=%s", event, user.id)
        return user

    async def update_profile(
        self,
        user: User,
        name: str,
        school_name: str = "",
        class_grade: Optional[str] = None,
    ) -> User:
        name = (name or "").strip()
        school_name = (school_name or "").strip()
        class_grade = (class_grade or "").strip()
        if not name:
            raise ValidationFailed("Name is required.")
        if not user.is_super_admin and not school_name:
            raise ValidationFailed("School / organization is required.")
        if user.role is UserRole.student and not class_grade:
            raise ValidationFailed("Class / grade is required for students.")

        user.name = name
        if user.is_super_admin:
            user.school_id, user.school_name = PLATFORM_SCHOOL_ID, PLATFORM_SCHOOL_NAME
        else:
            # the school id stays; renaming only changes the display name
            user.school_name = school_name
        if user.role is UserRole.student:
            user.class_grade = class_grade
        return await self._save_own(user, "profile_updated")

    async def change_password(
        self,
        user: User,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> User:
        if not current_password or not new_password or not confirm_password:
            raise ValidationFailed("Please fill out all password fields.")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed("New password must be at least 6 characters.")
        if new_password != confirm_password:
            raise ValidationFailed("New password and confirmation do not match.")
        if not verify_password(current_password, user.password):
            raise ValidationFailed("Current password is incorrect.", code="E_BAD_PASSWORD")
        user.password = hash_password(new_password)
        return await self._save_own(user, "password_changed")

    async def set_avatar(self, user: User, avatar_url: Optional[str]) -> User:
        """Store a photo URL or ``data:image/...`` URL; ``None`` or blank removes it."""
        avatar_url = (avatar_url or "").strip() or None
        if avatar_url is not None and avatar_url.startswith("data:"):
            header, _, payload = avatar_url.partition(",")
            if not header.startswith("data:image/"):
                raise ValidationFailed("Please upload a valid image file.")
            # base64 carries 3 bytes per 4 characters
            if len(payload) * 3 // 4 > MAX_AVATAR_BYTES:
                raise ValidationFailed("Please upload an image smaller than 2 MB.")
        if avatar_url is None and user.avatar_url is None:
            return user
        user.avatar_url = avatar_url
        return await self._save_own(user, "avatar_removed" if avatar_url is None else "avatar_updated")

    # ---- moderation -------------------------------------------------------

    async def set_status(self, actor: User, user_id: str, status: AccountStatus) -> User:
        target = await self.get_user(user_id)
        ensure_can_manage(actor, target, verb="disabled" if status is AccountStatus.disabled else "modified")
        if status is AccountStatus.pending:
            raise ValidationFailed("Accounts cannot be moved back to pending")
        if target.status is status:
            return target

        action = _STATUS_ACTIONS[status]
        if target.status is AccountStatus.pending and target.role is UserRole.teacher and status is AccountStatus.active:
            action = ActivityAction.APPROVE_TEACHER
        previous = target.status
        target.status = status
        await self.storage.users.upsert(target)
        self.storage.session.refresh(target)
        self.activity.record(actor, action, target=target, details=f"{previous.value} -> {status.value}")
        logger.info("set_status user_id=%s status=%s actor_id=%s", target.id, status.value, actor.id)
        return target

    async def approve_teacher(self, actor: User, user_id: str) -> User:
        target = await self.get_user(user_id)
        if target.role is not UserRole.teacher or target.status is not AccountStatus.pending:
            raise ValidationFailed("Only pending teacher accounts can be approved")
        return await self.set_status(actor, user_id, AccountStatus.active)

    async def delete_user(self, actor: User, user_id: str) -> None:
        target = await self.get_user(user_id)
        ensure_can_manage(actor, target, verb="deleted")
        await self.storage.users.delete(target.id)
        self.storage.session.clear_if(target.id)
        self.activity.record(actor, ActivityAction.DELETE_USER, target=target, details=target.email)
        logger.info("delete_user user_id=%s actor_id=%s", target.id, actor.id)

    async def list_users(self, actor: User, *, school_id: Optional[str] = None, role: Optional[UserRole] = None) -> List[User]:
        users = await self.storage.users.get_all()
        if actor.role is not UserRole.super_admin:
            users = [u for u in users if u.in_school(actor.school_id, actor.school_name)]
        elif school_id:
            users = [u for u in users if u.school_id == school_id]
        if role is not None:
            users = [u for u in users if u.role is role]
        return users

    async def list_schools(self) -> List[SchoolSummary]:
        summaries: Dict[str, SchoolSummary] = {}
        for user in await self.storage.users.get_all():
            if not user.school_id or user.school_id == PLATFORM_SCHOOL_ID:
                continue
            entry = summaries.get(user.school_id)
            if entry is None:
                entry = summaries[user.school_id] = SchoolSummary(
                    school_id=user.school_id, school_name=user.school_name, user_count=0
                )
            entry.user_count += 1
        return sorted(summaries.values(), key=lambda s: s.school_name.lower())

    def generate_admin_code(self, actor: User, school_name: str):
        code = self.admin_codes.generate(school_name)
        self.activity.record(
            actor,
            ActivityAction.GENERATE_ADMIN_CODE,
            details=f"{code.school_name} ({code.code})",
        )
        return code
