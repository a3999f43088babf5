"""Auth (register/login/session) and admin (moderation) endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.common.deps import (
    get_accounts_service,
    get_current_user,
    get_store,
    require_moderator,
    require_role,
    require_super_admin,
)
from app.common.schemas import StatusResponse
from app.db.storage import Storage
from app.features.accounts.policy import route_gate
from app.features.accounts.schemas import (
    ActivityLogEntry,
    AdminCode,
    AdminCodeRequest,
    AvatarRequest,
    GateResponse,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    PublicUser,
    RegisterRequest,
    SchoolSummary,
    StatusUpdateRequest,
    User,
    UserRole,
)
from app.features.accounts.service import AccountsService

router = APIRouter(prefix="/auth", tags=["auth"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    accounts: AccountsService = Depends(get_accounts_service),
) -> LoginResponse:
    return await accounts.register(payload)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    accounts: AccountsService = Depends(get_accounts_service),
) -> LoginResponse:
    return await accounts.login(payload.email, payload.password)


@router.post("/logout", response_model=StatusResponse)
async def logout(accounts: AccountsService = Depends(get_accounts_service)) -> StatusResponse:
    accounts.logout()
    return StatusResponse(status="ok", message="Logged out")


@router.get("/me", response_model=PublicUser)
async def me(current: User = Depends(get_current_user)) -> PublicUser:
    return PublicUser.from_user(current)


@router.put("/me", response_model=PublicUser)
async def update_me(
    payload: ProfileUpdateRequest,
    current: User = Depends(require_role()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> PublicUser:
    user = await accounts.update_profile(current, payload.name, payload.school_name, payload.class_grade)
    return PublicUser.from_user(user)


@router.put("/me/password", response_model=StatusResponse)
async def change_my_password(
    payload: PasswordChangeRequest,
    current: User = Depends(require_role()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> StatusResponse:
    await accounts.change_password(
        current, payload.current_password, payload.new_password, payload.confirm_password
    )
    return StatusResponse(status="ok", message="Password updated successfully")


@router.put("/me/avatar", response_model=PublicUser)
async def set_my_avatar(
    payload: AvatarRequest,
    current: User = Depends(require_role()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> PublicUser:
    return PublicUser.from_user(await accounts.set_avatar(current, payload.avatar_url))


@router.get("/gate", response_model=GateResponse)
async def gate(
    destination: str = Query(..., description="Path the client wants to open"),
    accounts: AccountsService = Depends(get_accounts_service),
) -> GateResponse:
    """Where a client should land for ``destination`` given who is logged in."""
    return route_gate(await accounts.current_user(), destination)


# ---- admin ---------------------------------------------------------------

@admin_router.get("/users", response_model=List[PublicUser])
async def list_users(
    school_id: Optional[str] = None,
    role: Optional[UserRole] = None,
    actor: User = Depends(require_moderator()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> List[PublicUser]:
    users = await accounts.list_users(actor, school_id=school_id, role=role)
    return [PublicUser.from_user(u) for u in users]


@admin_router.get("/schools", response_model=List[SchoolSummary])
async def list_schools(
    _: User = Depends(require_super_admin()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> List[SchoolSummary]:
    return await accounts.list_schools()


@admin_router.put("/users/{user_id}/status", response_model=PublicUser)
async def update_status(
    user_id: str,
    payload: StatusUpdateRequest,
    actor: User = Depends(require_moderator()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> PublicUser:
    return PublicUser.from_user(await accounts.set_status(actor, user_id, payload.status))


@admin_router.post("/users/{user_id}/approve", response_model=PublicUser)
async def approve_teacher(
    user_id: str,
    actor: User = Depends(require_moderator()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> PublicUser:
    return PublicUser.from_user(await accounts.approve_teacher(actor, user_id))


@admin_router.delete("/users/{user_id}", response_model=StatusResponse)
async def delete_user(
    user_id: str,
    actor: User = Depends(require_moderator()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> StatusResponse:
    await accounts.delete_user(actor, user_id)
    return StatusResponse(status="ok", message="User deleted", data={"user_id": user_id})


@admin_router.get("/admin-codes", response_model=List[AdminCode])
async def list_admin_codes(
    _: User = Depends(require_super_admin()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> List[AdminCode]:
    return accounts.admin_codes.list()


@admin_router.post("/admin-codes", response_model=AdminCode)
async def generate_admin_code(
    payload: AdminCodeRequest,
    actor: User = Depends(require_super_admin()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> AdminCode:
    return accounts.generate_admin_code(actor, payload.school_name)


@admin_router.get("/activity", response_model=List[ActivityLogEntry])
async def list_activity(
    limit: Optional[int] = Query(None, ge=1),
    _: User = Depends(require_super_admin()),
    accounts: AccountsService = Depends(get_accounts_service),
) -> List[ActivityLogEntry]:
    return accounts.activity.recent(limit)


@admin_router.post("/sync", response_model=StatusResponse)
async def sync_pending(
    _: User = Depends(require_super_admin()),
    storage: Storage = Depends(get_store),
) -> StatusResponse:
    """Push writes made while Supabase was unreachable."""
    result = await storage.sync_pending()
    return StatusResponse(status="ok", message="Sync finished", data={"collections": result})
