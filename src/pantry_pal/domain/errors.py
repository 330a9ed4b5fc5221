"""Error types raised at the point of failure and shown to users."""

from pantry_pal.domain.auth import AuthErrorCode


class PantryPalError(Exception):
    """Base error carrying a user-facing message."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, user_message: str | None = None) -> None:
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class NetworkError(PantryPalError):
    """Transport failure talking to a remote service."""

    default_message = "Network error. Please check your connection."


class DecodeError(PantryPalError):
    """A response was malformed or missing required fields."""

    default_message = "Could not read the response."


class NotFoundError(PantryPalError):
    """The requested record does not exist upstream."""

    default_message = "Not found."


class ProductNotFoundError(NotFoundError):
    default_message = "Product not found in database."


class RecipeNotFoundError(NotFoundError):
    default_message = "Recipe not found."


class ValidationError(PantryPalError):
    """User input failed validation."""

    default_message = "Invalid input."


class AuthenticationError(PantryPalError):
    """The auth backend rejected a sign-in, sign-up or sign-out."""

    default_message = "Authentication failed."

    def __init__(
        self,
        code: AuthErrorCode,
        user_message: str | None = None,
        backend_code: str | int | None = None,
    ) -> None:
        self.code = code
        self.backend_code = backend_code
        super().__init__(user_message)
