"""
Dependency Injection Container

Centralizes dependency creation and wiring for the auth service.

Usage:
    container = Container(Settings.from_env())
    await container.init()
    app = create_app(container)
"""

import logging
from datetime import timedelta

from shared.config.settings import Settings

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency Injection Container.

    Each service is created lazily on first use and cached, so every request
    shares the same stateless collaborators.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._cache = {}

    async def init(self) -> None:
        """Prepare storage and seed the initial user if configured."""
        await self.user_repository().init_db()
        auth = self.settings.auth
        user = await self.login_service().ensure_initial_user(
            auth.initial_username, auth.initial_password
        )
        if user:
            logger.info("Initial user '%s' is present", user.username)

    # === Repository Layer ===

    def user_repository(self):
        """Get or create UserRepository"""
        if "user_repository" not in self._cache:
            from infrastructure.persistence.sqlite_user_repository import SQLiteUserRepository
            self._cache["user_repository"] = SQLiteUserRepository.from_url(
                self.settings.database.url
            )
        return self._cache["user_repository"]

    # === Service Layer ===

    def password_hasher(self):
        """Get or create PasswordHasher"""
        if "password_hasher" not in self._cache:
            from application.services.password_hasher import PasswordHasher
            auth = self.settings.auth
            self._cache["password_hasher"] = PasswordHasher(
                time_cost=auth.password_time_cost,
                memory_cost=auth.password_memory_cost,
                parallelism=auth.password_parallelism,
            )
        return self._cache["password_hasher"]

    def token_codec(self):
        """Get or create TokenCodec"""
        if "token_codec" not in self._cache:
            from application.services.token_codec import TokenCodec
            auth = self.settings.auth
            self._cache["token_codec"] = TokenCodec(
                secret=auth.jwt_secret,
                algorithm=auth.jwt_algorithm,
                leeway_seconds=auth.token_leeway_seconds,
            )
        return self._cache["token_codec"]

    def login_service(self):
        """Get or create LoginService"""
        if "login_service" not in self._cache:
            from application.services.login_service import LoginService
            self._cache["login_service"] = LoginService(
                repository=self.user_repository(),
                hasher=self.password_hasher(),
                codec=self.token_codec(),
                token_ttl=timedelta(days=self.settings.auth.token_ttl_days),
            )
        return self._cache["login_service"]

    def request_authenticator(self):
        """Get or create RequestAuthenticator"""
        if "request_authenticator" not in self._cache:
            from application.services.request_authenticator import RequestAuthenticator
            api = self.settings.api
            self._cache["request_authenticator"] = RequestAuthenticator(
                repository=self.user_repository(),
                codec=self.token_codec(),
                api_prefix=api.prefix,
                login_path=api.full_login_path,
                scheme=self.settings.auth.scheme,
            )
        return self._cache["request_authenticator"]
