"""User entity: an account that can exchange credentials for a token."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,50}$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    id: str
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(cls, username: str, password_hash: str) -> User:
        cls._validate_username(username)
        if not password_hash:
            raise ValueError("password_hash is required")

        now = _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def _validate_username(username: str) -> None:
        if not USERNAME_PATTERN.match(username):
            raise ValueError(
                "username must be 3-50 characters, only [a-zA-Z0-9_-]"
            )

    def change_password(self, new_password_hash: str) -> None:
        self.password_hash = new_password_hash
        self.updated_at = _utcnow()
