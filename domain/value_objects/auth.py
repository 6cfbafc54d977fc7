"""Value objects for token authentication."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


class TokenStatus(Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    SIGNATURE_MISMATCH = "signature_mismatch"


@dataclass(frozen=True)
class TokenClaims:
    subject: str  # user ID
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of decoding a token; ``claims`` is only set when VALID."""

    status: TokenStatus
    claims: Optional[TokenClaims] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID

    @classmethod
    def valid(cls, claims: TokenClaims) -> TokenVerification:
        return cls(status=TokenStatus.VALID, claims=claims)

    @classmethod
    def rejected(cls, status: TokenStatus) -> TokenVerification:
        if status is TokenStatus.VALID:
            raise ValueError("a rejected verification cannot be VALID")
        return cls(status=status)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class LoginResult:
    token: str
    expires_at: datetime
    user_id: str


@dataclass(frozen=True)
class AuthenticatedIdentity:
    id: str
    username: str
