"""Domain value objects"""

from domain.value_objects.auth import (
    AuthenticatedIdentity,
    Credentials,
    IssuedToken,
    LoginResult,
    TokenClaims,
    TokenStatus,
    TokenVerification,
)

__all__ = [
    "AuthenticatedIdentity",
    "Credentials",
    "IssuedToken",
    "LoginResult",
    "TokenClaims",
    "TokenStatus",
    "TokenVerification",
]
