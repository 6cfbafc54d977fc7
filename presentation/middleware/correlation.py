"""
Correlation ID middleware for the REST API.

Assigns a correlation_id to every incoming request (reusing the client's
X-Correlation-ID header when present), stores it in contextvars for the
JSON log formatter and echoes it on the response.
"""

import logging
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from shared.logging.correlation import (
    HEADER_NAME,
    accept_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        cid = accept_correlation_id(request.headers.get(HEADER_NAME))
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers[HEADER_NAME] = cid
        return response
