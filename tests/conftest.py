"""
Pytest configuration and shared fixtures for the test suite.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from application.services.password_hasher import PasswordHasher
from application.services.token_codec import TokenCodec
from domain.entities.user import User
from shared.config.settings import ApiConfig, AuthConfig, DatabaseConfig, Settings

TEST_SECRET = "test-signing-secret-0123456789abcdef0123456789"
PASSWORD = "correct horse battery staple"


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """Argon2 hasher with minimal cost so tests stay fast."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(secret=TEST_SECRET)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary database."""
    return Settings(
        auth=AuthConfig(
            jwt_secret=TEST_SECRET,
            password_time_cost=1,
            password_memory_cost=8,
            password_parallelism=1,
        ),
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'auth.db'}"),
        api=ApiConfig(),
    )


# ============================================================================
# Entity Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def password_hash(hasher: PasswordHasher) -> str:
    return hasher.hash(PASSWORD)


@pytest.fixture
def alice(password_hash: str) -> User:
    return User.create(username="alice", password_hash=password_hash)


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_user_repository() -> Mock:
    """Create a mock user repository."""
    repo = Mock()
    repo.save = AsyncMock()
    repo.update = AsyncMock()
    repo.delete = AsyncMock(return_value=True)
    repo.find_by_id = AsyncMock(return_value=None)
    repo.find_by_username = AsyncMock(return_value=None)
    repo.find_all = AsyncMock(return_value=[])
    return repo


@pytest.fixture(scope="session")
def password() -> str:
    """Plaintext matching the ``password_hash`` fixture."""
    return PASSWORD
