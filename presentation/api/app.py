"""
FastAPI application factory.

Creates and configures the FastAPI app with routes, middleware and
dependency injection from the shared Container.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.exceptions import UpstreamLookupError
from presentation.api.dependencies import set_container
from presentation.api.routes import auth, health
from presentation.middleware.auth import LOOKUP_FAILED_MESSAGE, TokenAuthMiddleware
from presentation.middleware.correlation import CorrelationIdMiddleware
from shared.container import Container

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Endpoint not found"


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": NOT_FOUND_MESSAGE})
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _upstream_error_handler(request: Request, exc: UpstreamLookupError) -> JSONResponse:
    logger.error("User store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"message": LOOKUP_FAILED_MESSAGE})


def create_app(container: Container) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        container: DI container; its storage must already be initialized.

    Returns:
        Configured FastAPI application.
    """
    set_container(container)
    api = container.settings.api

    app = FastAPI(
        title="Token Auth API",
        description=(
            f"Stateless bearer-token authentication. Obtain a token from "
            f"`POST {api.full_login_path}` and send it as "
            f"`Authorization: {container.settings.auth.scheme} <token>` on every "
            f"other request under `{api.prefix}`."
        ),
        version="1.0.0",
        debug=container.settings.debug,
    )

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(UpstreamLookupError, _upstream_error_handler)

    # Last added runs first: correlation id wraps authentication
    app.add_middleware(TokenAuthMiddleware, authenticator=container.request_authenticator())
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(health.router)
    app.include_router(auth.create_router(api.login_path), prefix=api.prefix)

    logger.info(
        "REST API configured: %d routes, login at %s",
        len(app.routes),
        api.full_login_path,
    )
    return app
