"""Domain error taxonomy shared by services and endpoints.

Services raise these; the FastAPI layer converts them into
``{"error_code": ..., "message": ...}`` responses with the mapped status.
"""
from __future__ import annotations


class EcoError(Exception):
    status_code = 400
    code = "E_ECO"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_detail(self) -> dict:
        return {"error_code": self.code, "message": self.message}


class ValidationFailed(EcoError):
    """Missing or malformed input, raised before any state is touched."""
    status_code = 422
    code = "E_VALIDATION"


class PolicyViolation(EcoError):
    status_code = 403
    code = "E_POLICY"


class Conflict(PolicyViolation):
    """Uniqueness rules: duplicate email, used admin code, second admin per school."""
    status_code = 409
    code = "E_CONFLICT"


class NotFound(EcoError):
    status_code = 404
    code = "E_NOT_FOUND"


class AuthenticationFailed(EcoError):
    status_code = 401
    code = "E_AUTH"


class StorageUnavailable(EcoError):
    """Both the remote and the local store failed."""
    status_code = 503
    code = "E_STORAGE"
