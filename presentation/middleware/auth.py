"""Token authentication middleware for the REST API."""

import logging
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from application.services.request_authenticator import RequestAuthenticator
from domain.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    UpstreamLookupError,
    UserNoLongerExistsError,
)

logger = logging.getLogger(__name__)

TOKEN_NOT_VALID_MESSAGE = "Token not valid"
LOOKUP_FAILED_MESSAGE = "Authentication service unavailable"


def _unauthorized() -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"message": TOKEN_NOT_VALID_MESSAGE},
        headers={"WWW-Authenticate": "Bearer"},
    )


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Rejects requests under the API prefix that lack a valid token.

    The login path is the single exception. On success the caller's
    AuthenticatedIdentity is stored on ``request.state.identity``.
    """

    def __init__(self, app: ASGIApp, authenticator: RequestAuthenticator):
        super().__init__(app)
        self.authenticator = authenticator

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if not self.authenticator.is_protected(path):
            return await call_next(request)

        try:
            identity = await self.authenticator.authenticate(
                request.headers.get("Authorization")
            )
        except TokenExpiredError:
            logger.info("Rejected %s %s: token expired", request.method, path)
            return _unauthorized()
        except TokenInvalidError as e:
            logger.info("Rejected %s %s: %s", request.method, path, e)
            return _unauthorized()
        except UserNoLongerExistsError as e:
            logger.warning(
                "Rejected %s %s: %s (user id=%s)", request.method, path, e, e.user_id
            )
            return _unauthorized()
        except UpstreamLookupError:
            logger.exception("User lookup failed while authenticating %s %s", request.method, path)
            return JSONResponse(status_code=503, content={"message": LOOKUP_FAILED_MESSAGE})

        request.state.identity = identity
        logger.debug("Auth OK: user=%s %s %s", identity.id, request.method, path)
        return await call_next(request)
