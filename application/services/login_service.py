"""LoginService: exchanges credentials for a signed token."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Optional

from application.services.password_hasher import PasswordHasher
from application.services.token_codec import TokenCodec
from domain.entities.user import User
from domain.exceptions import (
    HashFormatError,
    InvalidCredentialsError,
    UpstreamLookupError,
)
from domain.repositories.user_repository import UserRepository
from domain.value_objects.auth import Credentials, LoginResult

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(days=7)


class LoginService:
    """Application service for the login flow.

    Per request: look the user up, verify the password, issue a token.
    Unknown user and wrong password raise the same InvalidCredentialsError;
    only its ``reason`` (logged, never returned) tells them apart.
    """

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        codec: TokenCodec,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
    ) -> None:
        self._repo = repository
        self._hasher = hasher
        self._codec = codec
        self._token_ttl = token_ttl

    async def login(self, credentials: Credentials) -> LoginResult:
        user = await self._find_user(credentials.username)
        if user is None:
            logger.info("Login failed for '%s': user not found", credentials.username)
            raise InvalidCredentialsError(InvalidCredentialsError.USER_NOT_FOUND)

        try:
            matches = await asyncio.to_thread(
                self._hasher.verify, credentials.password, user.password_hash
            )
        except HashFormatError as e:
            logger.error("Stored password hash for user id=%s is unreadable", user.id)
            raise InvalidCredentialsError(InvalidCredentialsError.CORRUPT_HASH) from e

        if not matches:
            logger.info("Login failed for '%s': password mismatch", credentials.username)
            raise InvalidCredentialsError(InvalidCredentialsError.PASSWORD_MISMATCH)

        await self._upgrade_hash_if_needed(user, credentials.password)

        issued = self._codec.issue(user.id, self._token_ttl)
        logger.info(
            "User '%s' logged in, token expires %s",
            user.username,
            issued.expires_at.isoformat(),
        )
        return LoginResult(
            token=issued.token,
            expires_at=issued.expires_at,
            user_id=user.id,
        )

    async def create_user(self, username: str, password: str) -> User:
        if await self._find_user(username):
            raise ValueError(f"Username '{username}' already exists")

        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        user = User.create(username=username, password_hash=password_hash)
        await self._repo.save(user)
        logger.info("User '%s' created", username)
        return user

    async def ensure_initial_user(
        self, username: Optional[str], password: Optional[str]
    ) -> Optional[User]:
        """Create the configured bootstrap user unless it already exists."""
        if not username or not password:
            return None

        existing = await self._find_user(username)
        if existing:
            return existing
        return await self.create_user(username, password)

    async def _find_user(self, username: str) -> Optional[User]:
        try:
            return await self._repo.find_by_username(username)
        except UpstreamLookupError:
            raise
        except Exception as e:
            raise UpstreamLookupError(f"user lookup failed: {e}") from e

    async def _upgrade_hash_if_needed(self, user: User, password: str) -> None:
        # Rehash if needed (argon2 parameter upgrade)
        if not self._hasher.needs_rehash(user.password_hash):
            return
        try:
            user.change_password(await asyncio.to_thread(self._hasher.hash, password))
            await self._repo.update(user)
        except Exception as e:
            logger.warning("Password hash upgrade failed for user '%s': %s", user.username, e)
            return
        logger.info("Password hash upgraded for user '%s'", user.username)
