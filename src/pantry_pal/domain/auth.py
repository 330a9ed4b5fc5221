"""Authentication outcomes and backend error code mapping."""

from dataclasses import dataclass
from enum import StrEnum

from pantry_pal.domain.models import User


class AuthErrorCode(StrEnum):
    """Categories of sign-in and sign-up failures."""

    WRONG_PASSWORD = "wrong_password"
    INVALID_EMAIL = "invalid_email"
    EMAIL_IN_USE = "email_in_use"
    WEAK_PASSWORD = "weak_password"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


# Supabase error_code strings plus the legacy numeric codes.
_BACKEND_CODES: dict[str | int, AuthErrorCode] = {
    "invalid_credentials": AuthErrorCode.WRONG_PASSWORD,
    "email_address_invalid": AuthErrorCode.INVALID_EMAIL,
    "validation_failed": AuthErrorCode.INVALID_EMAIL,
    "email_exists": AuthErrorCode.EMAIL_IN_USE,
    "user_already_exists": AuthErrorCode.EMAIL_IN_USE,
    "weak_password": AuthErrorCode.WEAK_PASSWORD,
    17007: AuthErrorCode.EMAIL_IN_USE,
    17008: AuthErrorCode.INVALID_EMAIL,
    17009: AuthErrorCode.WRONG_PASSWORD,
    17011: AuthErrorCode.WRONG_PASSWORD,
    17026: AuthErrorCode.WEAK_PASSWORD,
}

_MESSAGES = {
    AuthErrorCode.WRONG_PASSWORD: "Incorrect password. Please try again.",
    AuthErrorCode.INVALID_EMAIL: "Please enter a valid email address.",
    AuthErrorCode.EMAIL_IN_USE: (
        "This email is already registered. Please log in instead."
    ),
    AuthErrorCode.WEAK_PASSWORD: (
        "Password is too weak. Please use a stronger password."
    ),
}


def map_backend_code(backend_code: str | int | None) -> AuthErrorCode:
    """Map a backend-specific error code onto an AuthErrorCode."""
    if backend_code is None:
        return AuthErrorCode.UNKNOWN
    if isinstance(backend_code, str) and backend_code.isdigit():
        backend_code = int(backend_code)
    return _BACKEND_CODES.get(backend_code, AuthErrorCode.UNKNOWN)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-in or sign-up attempt."""

    user: User | None = None
    error_code: AuthErrorCode | None = None
    backend_code: str | int | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None and self.error_code is None

    @property
    def user_id(self) -> str | None:
        return self.user.id if self.user else None

    @classmethod
    def success(cls, user: User) -> "AuthResult":
        return cls(user=user)

    @classmethod
    def failure(
        cls,
        code: AuthErrorCode,
        message: str | None = None,
        backend_code: str | int | None = None,
    ) -> "AuthResult":
        return cls(error_code=code, backend_code=backend_code, message=message)

    def user_message(self) -> str | None:
        """Return the user-facing message for a failed result."""
        if self.error_code is None:
            return None
        if self.error_code in _MESSAGES:
            return _MESSAGES[self.error_code]
        if self.error_code is AuthErrorCode.VALIDATION and self.message:
            return self.message
        detail = self.message or "unknown error"
        return f"Authentication failed: {detail}"
