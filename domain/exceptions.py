"""Authentication error taxonomy.

Credential and token failures collapse to a single 401 at the HTTP boundary,
but each carries enough detail to be told apart in the logs.
"""

from __future__ import annotations

from typing import Optional

from domain.value_objects.auth import TokenStatus


class AuthError(Exception):
    """Base class for authentication errors."""


class InvalidInputError(AuthError):
    """Raised when a password is empty or not a string."""


class HashFormatError(AuthError):
    """Raised when a stored password hash is not a recognizable encoding."""


class InvalidCredentialsError(AuthError):
    """Unknown user or wrong password; the message never says which."""

    USER_NOT_FOUND = "user_not_found"
    PASSWORD_MISMATCH = "password_mismatch"
    CORRUPT_HASH = "corrupt_hash"

    def __init__(self, reason: str) -> None:
        super().__init__("Invalid username or password")
        self.reason = reason


class TokenInvalidError(AuthError):
    """Missing, malformed, or tampered token."""

    def __init__(self, status: Optional[TokenStatus], detail: str) -> None:
        super().__init__(detail)
        self.status = status


class TokenExpiredError(AuthError):
    def __init__(self) -> None:
        super().__init__("Token has expired")
        self.status = TokenStatus.EXPIRED


class UserNoLongerExistsError(AuthError):
    """Token is genuine but its subject has been removed."""

    def __init__(self, user_id: str) -> None:
        super().__init__("stale token: user removed")
        self.user_id = user_id


class UpstreamLookupError(AuthError):
    """The user directory failed; an infrastructure fault, not a denial."""
