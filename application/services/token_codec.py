"""TokenCodec: signed, self-contained bearer tokens (JWT, HS256)."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from domain.value_objects.auth import (
    IssuedToken,
    TokenClaims,
    TokenStatus,
    TokenVerification,
)

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenCodec:
    """Issue and verify tokens carrying {sub, iat, exp}.

    The secret is held privately and is never part of a token or a log line.
    verify() never raises for a bad token: it reports one of the TokenStatus
    outcomes so callers can tell tampering from expiry.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", leeway_seconds: int = 0) -> None:
        if not secret:
            raise ValueError("token signing secret is required")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self._algorithm = algorithm
        self._leeway = timedelta(seconds=leeway_seconds)

    def __repr__(self) -> str:
        return f"TokenCodec(algorithm={self._algorithm!r})"

    def issue(self, subject_id: str, ttl: timedelta) -> IssuedToken:
        if not subject_id:
            raise ValueError("subject_id is required")

        now = datetime.now(timezone.utc)
        expires_at = now + ttl
        payload = {
            "sub": subject_id,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        # JWT timestamps are whole seconds
        return IssuedToken(token=token, expires_at=expires_at.replace(microsecond=0))

    def verify(self, token: str) -> TokenVerification:
        # PyJWT checks the signature before it parses or trusts any claim,
        # so a forged token is reported as SIGNATURE_MISMATCH even if expired.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                leeway=self._leeway,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidSignatureError:
            return TokenVerification.rejected(TokenStatus.SIGNATURE_MISMATCH)
        except jwt.ExpiredSignatureError:
            return TokenVerification.rejected(TokenStatus.EXPIRED)
        except jwt.InvalidTokenError as e:
            logger.debug("Malformed token rejected: %s", type(e).__name__)
            return TokenVerification.rejected(TokenStatus.MALFORMED)

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            return TokenVerification.rejected(TokenStatus.MALFORMED)

        return TokenVerification.valid(
            TokenClaims(
                subject=subject,
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        )
