"""Sign-in and sign-up with input validation."""

from dataclasses import dataclass

from pantry_pal.domain.auth import AuthErrorCode, AuthResult
from pantry_pal.services.hub import DataHub

_MIN_PASSWORD_LENGTH = 6


def validate_sign_in(email: str, password: str) -> str | None:
    """Return a message describing the first invalid field, if any."""
    if not email.strip():
        return "Please enter your email"
    if not password:
        return "Please enter your password"
    return None


def validate_sign_up(email: str, password: str, confirm_password: str) -> str | None:
    """Return a message describing the first invalid field, if any."""
    if not email.strip():
        return "Please enter your email"
    if not password:
        return "Please enter a password"
    if not confirm_password:
        return "Please confirm your password"
    if password != confirm_password:
        return "Passwords do not match"
    if len(password) < _MIN_PASSWORD_LENGTH:
        return f"Password must be at least {_MIN_PASSWORD_LENGTH} characters"
    return None


@dataclass
class AccountService:
    """Validates credentials before handing them to the hub."""

    hub: DataHub

    async def sign_in(self, email: str, password: str) -> AuthResult:
        problem = validate_sign_in(email, password)
        if problem:
            return AuthResult.failure(AuthErrorCode.VALIDATION, problem)
        return await self.hub.sign_in(email.strip(), password)

    async def sign_up(
        self, email: str, password: str, confirm_password: str
    ) -> AuthResult:
        """Create an account once the form passes validation."""
        problem = validate_sign_up(email, password, confirm_password)
        if problem:
            return AuthResult.failure(AuthErrorCode.VALIDATION, problem)
        return await self.hub.sign_up(email.strip(), password)

    async def sign_out(self) -> None:
        await self.hub.sign_out()
