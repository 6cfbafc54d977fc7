"""FastAPI dependency injection: bridges DI container to FastAPI's Depends()."""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status

from domain.value_objects.auth import AuthenticatedIdentity
from shared.container import Container

logger = logging.getLogger(__name__)

# Module-level container reference, set during app creation
_container: Optional[Container] = None


def set_container(container: Container) -> None:
    """Set the DI container for FastAPI dependencies."""
    global _container
    _container = container
    logger.info("REST API: DI container connected")


def get_container() -> Container:
    """Get the DI container."""
    if _container is None:
        raise RuntimeError("DI container not initialized. Call set_container() first.")
    return _container


def get_login_service():
    """Get LoginService from container."""
    return get_container().login_service()


def get_current_identity(request: Request) -> AuthenticatedIdentity:
    """Identity attached by the authentication middleware."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        # Only reachable if a protected route is mounted outside the API prefix
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token not valid",
        )
    return identity
