from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv


MIN_SECRET_LENGTH = 32
SIGNING_ALGORITHMS = ("HS256", "HS384", "HS512")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class AuthConfig:
    """Token signing and password hashing configuration.

    The signing secret never appears in repr() and must never be logged.
    """
    jwt_secret: str = field(repr=False)
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7
    token_leeway_seconds: int = 0
    scheme: str = "Bearer"
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4
    initial_username: Optional[str] = None
    initial_password: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if len(self.jwt_secret) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters"
            )
        if self.token_ttl_days <= 0:
            raise ValueError("TOKEN_TTL_DAYS must be positive")
        if self.jwt_algorithm not in SIGNING_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be one of {', '.join(SIGNING_ALGORITHMS)}"
            )

    @classmethod
    def from_env(cls) -> "AuthConfig":
        secret = os.getenv("JWT_SECRET_KEY")
        if not secret:
            raise ValueError("JWT_SECRET_KEY is required")
        return cls(
            jwt_secret=secret,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            token_ttl_days=int(os.getenv("TOKEN_TTL_DAYS", "7")),
            token_leeway_seconds=int(os.getenv("TOKEN_LEEWAY_SECONDS", "0")),
            scheme=os.getenv("AUTH_SCHEME", "Bearer"),
            password_time_cost=int(os.getenv("PASSWORD_TIME_COST", "3")),
            password_memory_cost=int(os.getenv("PASSWORD_MEMORY_COST", "65536")),
            password_parallelism=int(os.getenv("PASSWORD_PARALLELISM", "4")),
            initial_username=os.getenv("INITIAL_USERNAME") or None,
            initial_password=os.getenv("INITIAL_PASSWORD") or None,
        )


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration"""
    url: str = "sqlite:///./data/auth.db"

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        return cls(url=os.getenv("DATABASE_URL", "sqlite:///./data/auth.db"))


@dataclass(frozen=True)
class ApiConfig:
    """HTTP listener and routing configuration"""
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"
    login_path: str = "/login"

    def __post_init__(self):
        if not self.prefix.startswith("/") or self.prefix.endswith("/"):
            raise ValueError("API_PREFIX must start with '/' and not end with '/'")
        if not self.login_path.startswith("/"):
            raise ValueError("LOGIN_PATH must start with '/'")

    @property
    def full_login_path(self) -> str:
        return f"{self.prefix}{self.login_path}"

    @classmethod
    def from_env(cls) -> "ApiConfig":
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            prefix=os.getenv("API_PREFIX", "/api"),
            login_path=os.getenv("LOGIN_PATH", "/login"),
        )


@dataclass(frozen=True)
class Settings:
    """Application settings, loaded once at process start"""
    auth: AuthConfig
    database: DatabaseConfig
    api: ApiConfig
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            auth=AuthConfig.from_env(),
            database=DatabaseConfig.from_env(),
            api=ApiConfig.from_env(),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR") or None,
        )
