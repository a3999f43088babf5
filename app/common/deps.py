"""Shared FastAPI dependencies for storage, services and the session user."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from app.db.storage import Storage, get_storage
from app.features.accounts.policy import is_pending_gated
from app.features.accounts.schemas import User, UserRole
from app.features.accounts.service import AccountsService
from app.features.content.service import ContentService
from app.features.progress.service import ProgressService
from app.features.submissions.service import SubmissionsService


logger = logging.getLogger("auth.deps")


def _err(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error_code": code, "message": message})


def get_store() -> Storage:
    return get_storage()


def get_accounts_service(storage: Storage = Depends(get_store)) -> AccountsService:
    return AccountsService(storage)


def get_progress_service(storage: Storage = Depends(get_store)) -> ProgressService:
    return ProgressService(storage)


def get_submissions_service(storage: Storage = Depends(get_store)) -> SubmissionsService:
    return SubmissionsService(storage)


def get_content_service(storage: Storage = Depends(get_store)) -> ContentService:
    return ContentService(storage)


async def get_current_user(
    request: Request,
    accounts: AccountsService = Depends(get_accounts_service),
) -> User:
    """Resolve the logged-in user for this device.

    The cached session is re-read from storage so status changes made by a
    moderator take effect on the next request.
    """
    cached: User | None = getattr(request.state, "current_user", None)
    if cached is not None:
        return cached

    user = await accounts.current_user()
    if user is None:
        raise _err(status.HTTP_401_UNAUTHORIZED, "E_AUTH", "Please log in")
    request.state.current_user = user

    logger.info(
        "session_resolved user_id=%s role=%s request_id=%s path=%s",
        user.id,
        user.role.value,
        getattr(request.state, "request_id", None),
        request.url.path,
    )
    return user


def require_role(*roles: UserRole | str, allow_pending: bool = False) -> Callable:
    """Factory returning dependency enforcing that user has one of the roles.

    Args:
      roles: Allowed roles. Empty -> any logged-in user.
      allow_pending: If False, pending accounts (other than super-admins) are refused.
    """
    allowed = {UserRole(r) for r in roles if r}

    async def _checker(current: User = Depends(get_current_user)) -> User:
        if allowed and current.role not in allowed:
            raise _err(status.HTTP_403_FORBIDDEN, "E_ROLE", "Insufficient role")
        if not allow_pending and is_pending_gated(current):
            raise _err(status.HTTP_403_FORBIDDEN, "E_PENDING", "Your account is awaiting approval")
        return current

    return _checker


def require_reviewer() -> Callable:
    return require_role(UserRole.teacher, UserRole.admin, UserRole.super_admin)


def require_moderator() -> Callable:
    return require_role(UserRole.admin, UserRole.super_admin)


def require_super_admin() -> Callable:
    return require_role(UserRole.super_admin)
