"""Login and routing gates derived from role and account status."""
from __future__ import annotations

from typing import Dict, FrozenSet, Optional, Tuple

from app.common.errors import AuthenticationFailed, PolicyViolation
from app.features.accounts.schemas import (
    MODERATOR_ROLES,
    AccountStatus,
    GateResponse,
    User,
    UserRole,
)

LOGIN_VIEW = "/login"
HOME_VIEW = "/"
PENDING_VIEW = "/pending-approval"

DASHBOARDS: Dict[UserRole, str] = {
    UserRole.student: "/student-dashboard",
    UserRole.teacher: "/teacher-dashboard",
    UserRole.admin: "/admin-dashboard",
    UserRole.super_admin: "/super-admin",
}

PUBLIC_VIEWS = frozenset({HOME_VIEW, LOGIN_VIEW, "/register"})

_STUDENT = frozenset({UserRole.student})
_ANY_ROLE: FrozenSet[UserRole] = frozenset(UserRole)

# (path prefix, allowed roles); prefixes also cover "/lessons/<id>" and the like
PROTECTED_VIEWS: Tuple[Tuple[str, FrozenSet[UserRole]], ...] = (
    (PENDING_VIEW, _ANY_ROLE),
    (DASHBOARDS[UserRole.student], _STUDENT),
    (DASHBOARDS[UserRole.teacher], frozenset({UserRole.teacher})),
    (DASHBOARDS[UserRole.admin], frozenset({UserRole.admin})),
    (DASHBOARDS[UserRole.super_admin], frozenset({UserRole.super_admin})),
    ("/lessons", _STUDENT),
    ("/quizzes", _STUDENT),
    ("/challenges", _STUDENT),
    ("/leaderboard", _STUDENT),
    ("/profile", _ANY_ROLE),
)


def dashboard_for(role: UserRole) -> str:
    return DASHBOARDS[role]


def is_pending_gated(user: User) -> bool:
    """Pending accounts are held at the approval view; super-admins never are."""
    return user.status is AccountStatus.pending and not user.is_super_admin


def login_destination(user: User) -> str:
    return PENDING_VIEW if is_pending_gated(user) else dashboard_for(user.role)


def check_login_allowed(user: User) -> None:
    if user.status is AccountStatus.disabled:
        raise AuthenticationFailed(
            "Your account has been disabled. Please contact your school admin or super admin.",
            code="E_ACCOUNT_DISABLED",
        )


def _normalise(destination: str) -> str:
    return destination.split("?", 1)[0].rstrip("/") or HOME_VIEW


def _match(path: str) -> Optional[FrozenSet[UserRole]]:
    for prefix, roles in PROTECTED_VIEWS:
        if path == prefix or path.startswith(prefix + "/"):
            return roles
    return None


def route_gate(user: Optional[User], destination: str) -> GateResponse:
    path = _normalise(destination)
    roles = _match(path)
    if roles is None:
        return GateResponse(destination=destination, allowed=True)
    if user is None:
        return GateResponse(destination=destination, allowed=False, redirect_to=LOGIN_VIEW)
    if user.role not in roles:
        return GateResponse(destination=destination, allowed=False, redirect_to=HOME_VIEW)
    if is_pending_gated(user) and path != PENDING_VIEW:
        return GateResponse(destination=destination, allowed=False, redirect_to=PENDING_VIEW)
    return GateResponse(destination=destination, allowed=True)


def can_manage(actor: User, target: User) -> bool:
    """Super-admins manage anyone; admins only their own school."""
    if actor.role is UserRole.super_admin:
        return True
    return actor.role in MODERATOR_ROLES and target.in_school(actor.school_id, actor.school_name)


def ensure_can_manage(actor: User, target: User, *, verb: str = "modified") -> None:
    if target.is_super_admin:
        raise PolicyViolation(f"Super admin accounts cannot be {verb}.", code="E_SUPER_ADMIN_PROTECTED")
    if not can_manage(actor, target):
        raise PolicyViolation("You can only manage users from your own school.", code="E_SCOPE")
