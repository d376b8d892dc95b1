from dataclasses import dataclass
from enum import Enum
from typing import Any


class AuthStatus(str, Enum):
    ANONYMOUS = "anonymous"
    SUBMITTING = "submitting"
    LOCKED = "locked"
    AUTHENTICATED = "authenticated"
    ERROR = "error"


class AuthErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    CREDENTIAL_REJECTED = "credential_rejected"
    USERNAME_TAKEN = "username_taken"
    RATE_LIMITED = "rate_limited"
    UNREACHABLE = "unreachable"
    BACKEND_REJECTED = "backend_rejected"
    STORAGE_FAILED = "storage_failed"


@dataclass(frozen=True)
class AuthSnapshot:
    """Read-only view of the auth controller for the presentation layer."""

    status: AuthStatus
    user: dict[str, Any] | None = None
    message: str | None = None
    error_kind: AuthErrorKind | None = None
    failure_count: int = 0
    lock_remaining_seconds: int = 0
    verification_pending: bool = False
    remembered_email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED
