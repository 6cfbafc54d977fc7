"""RequestAuthenticator: validates the bearer token on protected requests."""

from __future__ import annotations

import logging
from typing import Optional

from application.services.token_codec import TokenCodec
from domain.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    UpstreamLookupError,
    UserNoLongerExistsError,
)
from domain.repositories.user_repository import UserRepository
from domain.value_objects.auth import AuthenticatedIdentity, TokenStatus

logger = logging.getLogger(__name__)


class RequestAuthenticator:
    """Gate run before every request under the API prefix.

    Exactly one path, the login path, bypasses the gate, matched exactly.
    The user is resolved again on each request, so removing a user
    invalidates all of their outstanding tokens.
    """

    def __init__(
        self,
        repository: UserRepository,
        codec: TokenCodec,
        api_prefix: str,
        login_path: str,
        scheme: str = "Bearer",
    ) -> None:
        if not login_path.startswith(api_prefix + "/"):
            raise ValueError("login path must live under the API prefix")
        self._repo = repository
        self._codec = codec
        self._api_prefix = api_prefix
        self._public_paths = frozenset({login_path})
        self._scheme = scheme

    @property
    def public_paths(self) -> frozenset[str]:
        return self._public_paths

    def is_public(self, path: str) -> bool:
        return path in self._public_paths

    def is_protected(self, path: str) -> bool:
        under_prefix = path == self._api_prefix or path.startswith(self._api_prefix + "/")
        return under_prefix and not self.is_public(path)

    def extract_token(self, authorization: Optional[str]) -> str:
        if not authorization:
            raise TokenInvalidError(None, "missing Authorization header")

        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != self._scheme.lower() or not token:
            raise TokenInvalidError(None, "Authorization header is not a bearer token")
        return token

    async def authenticate(self, authorization: Optional[str]) -> AuthenticatedIdentity:
        token = self.extract_token(authorization)

        verification = self._codec.verify(token)
        if verification.status is TokenStatus.EXPIRED:
            raise TokenExpiredError()
        if not verification.is_valid:
            raise TokenInvalidError(verification.status, f"token rejected: {verification.status.value}")

        subject = verification.claims.subject
        try:
            user = await self._repo.find_by_id(subject)
        except UpstreamLookupError:
            raise
        except Exception as e:
            raise UpstreamLookupError(f"user lookup failed: {e}") from e

        if user is None:
            raise UserNoLongerExistsError(subject)

        return AuthenticatedIdentity(id=user.id, username=user.username)
