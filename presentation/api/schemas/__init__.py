"""Pydantic v2 request/response schemas for REST API."""

from presentation.api.schemas.auth import (
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)
from presentation.api.schemas.system import HealthResponse

__all__ = [
    "IdentityResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "HealthResponse",
]
