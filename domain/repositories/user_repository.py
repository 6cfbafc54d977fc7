"""Repository interface for the User entity (the user directory)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from domain.entities.user import User


class UserRepository(ABC):
    """Lookup and storage of user records.

    Implementations raise ``UpstreamLookupError`` when the backing store fails.
    """

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert a new user. Raises ValueError if the username is taken."""
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_all(self) -> list[User]:
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        ...

    @abstractmethod
    async def update(self, user: User) -> None:
        ...
