"""Auth routes.

Endpoints:
  POST {prefix}{login_path} : public, the only route the middleware lets through
  GET  {prefix}/me          : token required
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from domain.exceptions import InvalidCredentialsError
from domain.value_objects.auth import AuthenticatedIdentity, Credentials
from presentation.api.dependencies import (
    get_container,
    get_current_identity,
    get_login_service,
)
from presentation.api.schemas.auth import (
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "user could not log in"


def create_router(login_path: str) -> APIRouter:
    router = APIRouter(tags=["auth"])

    @router.post(
        login_path,
        response_model=LoginResponse,
        responses={status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse}},
    )
    async def login(body: LoginRequest, service=Depends(get_login_service)):
        creds = Credentials(username=body.username, password=body.password)
        try:
            result = await service.login(creds)
        except InvalidCredentialsError as e:
            logger.warning("Login rejected: %s", e.reason)
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"message": LOGIN_FAILED_MESSAGE},
            )

        scheme = get_container().settings.auth.scheme
        return LoginResponse(
            token=f"{scheme} {result.token}",
            expires=result.expires_at,
            userid=result.user_id,
        )

    @router.get("/me", response_model=IdentityResponse)
    async def get_me(identity: AuthenticatedIdentity = Depends(get_current_identity)):
        return IdentityResponse(id=identity.id, username=identity.username)

    return router
