"""
Correlation ID context for request tracing.

Every HTTP request gets an ID (taken from the ``X-Correlation-ID`` header or
generated) that is stamped on every log line written while it is processed.
contextvars keep it isolated per request across awaits.

Usage:
    from shared.logging.correlation import get_correlation_id

    cid = get_correlation_id()
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

HEADER_NAME = "X-Correlation-ID"
MAX_INCOMING_LENGTH = 64


def get_correlation_id() -> Optional[str]:
    """Get current correlation_id (or None outside a request)."""
    return _correlation_id_var.get()


def set_correlation_id(cid: Optional[str]) -> Token:
    """Set correlation_id for the current context; returns a reset token."""
    return _correlation_id_var.set(cid)


def reset_correlation_id(token: Token) -> None:
    _correlation_id_var.reset(token)


def generate_correlation_id(prefix: str = "") -> str:
    """
    Generate a new correlation_id.

    Format: {prefix}{8 hex chars}, e.g. req-e5f6a7b8
    """
    short = uuid.uuid4().hex[:8]
    return f"{prefix}{short}" if prefix else short


def accept_correlation_id(incoming: Optional[str], prefix: str = "req-") -> str:
    """Reuse a client-supplied ID if it is sane, otherwise generate one."""
    if incoming and len(incoming) <= MAX_INCOMING_LENGTH and incoming.isprintable():
        return incoming
    return generate_correlation_id(prefix)
