"""Supabase Auth gateway."""

import logging
from dataclasses import dataclass

from supabase import AsyncClient

from pantry_pal.domain.auth import AuthErrorCode, map_backend_code
from pantry_pal.domain.errors import AuthenticationError
from pantry_pal.domain.models import User
from pantry_pal.services.hub import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Email and password authentication over ``client.auth``."""

    client: AsyncClient

    async def sign_in(self, email: str, password: str) -> User:
        """Sign in with email and password."""
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise _auth_error(exc) from exc
        return _require_user(response)

    async def sign_up(self, email: str, password: str) -> User:
        """Register a new account."""
        try:
            response = await self.client.auth.sign_up(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise _auth_error(exc) from exc
        return _require_user(response)

    async def sign_out(self) -> None:
        try:
            await self.client.auth.sign_out()
        except Exception as exc:
            raise _auth_error(exc) from exc

    async def current_user(self) -> User | None:
        """Return the user of the stored session, if one exists."""
        session = await self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return _to_user(session.user)


def _to_user(user: object) -> User:
    return User(id=str(user.id), email=getattr(user, "email", None))


def _require_user(response: object) -> User:
    user = getattr(response, "user", None)
    if user is None:
        raise AuthenticationError(AuthErrorCode.UNKNOWN, "no user returned")
    return _to_user(user)


def _auth_error(exc: Exception) -> AuthenticationError:
    backend_code = getattr(exc, "code", None)
    code = map_backend_code(backend_code)
    detail = getattr(exc, "message", None) or str(exc)
    _logger.debug("Auth backend error: code=%s detail=%s", backend_code, detail)
    return AuthenticationError(code, detail, backend_code)
