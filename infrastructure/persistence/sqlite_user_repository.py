"""SQLite implementation of UserRepository."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

import aiosqlite

from domain.entities.user import User
from domain.exceptions import UpstreamLookupError
from domain.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class SQLiteUserRepository(UserRepository):
    """aiosqlite-backed user directory; one connection per call."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        os.makedirs(
            os.path.dirname(self.db_path) if os.path.dirname(self.db_path) else ".",
            exist_ok=True,
        )

    @classmethod
    def from_url(cls, url: str) -> SQLiteUserRepository:
        return cls(url.replace("sqlite:///", ""))

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.IntegrityError:
            raise
        except aiosqlite.Error as e:
            logger.error("User store error on %s: %s", self.db_path, e)
            raise UpstreamLookupError(f"user store unavailable: {e}") from e

    async def init_db(self) -> None:
        """Create the users table if missing."""
        async with self._connect() as db:
            await db.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    username TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            await db.commit()
            logger.info("User table initialized")

    async def save(self, user: User) -> None:
        try:
            async with self._connect() as db:
                await db.execute(
                    """
                    INSERT INTO users (id, username, password_hash, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        user.id,
                        user.username,
                        user.password_hash,
                        user.created_at.isoformat(),
                        user.updated_at.isoformat(),
                    ),
                )
                await db.commit()
        except aiosqlite.IntegrityError as e:
            raise ValueError(f"Username '{user.username}' already exists") from e

    async def find_by_id(self, user_id: str) -> Optional[User]:
        async with self._connect() as db:
            async with db.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ) as cursor:
                row = await cursor.fetchone()
                return self._row_to_user(row) if row else None

    async def find_by_username(self, username: str) -> Optional[User]:
        async with self._connect() as db:
            async with db.execute(
                "SELECT * FROM users WHERE username = ?", (username,)
            ) as cursor:
                row = await cursor.fetchone()
                return self._row_to_user(row) if row else None

    async def find_all(self) -> list[User]:
        async with self._connect() as db:
            async with db.execute("SELECT * FROM users ORDER BY created_at") as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_user(row) for row in rows]

    async def delete(self, user_id: str) -> bool:
        async with self._connect() as db:
            cursor = await db.execute("DELETE FROM users WHERE id = ?", (user_id,))
            await db.commit()
            return cursor.rowcount > 0

    async def update(self, user: User) -> None:
        async with self._connect() as db:
            await db.execute(
                """
                UPDATE users SET
                    username = ?, password_hash = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    user.username,
                    user.password_hash,
                    user.updated_at.isoformat(),
                    user.id,
                ),
            )
            await db.commit()

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
