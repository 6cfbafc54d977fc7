#!/usr/bin/env python3
"""
Token Auth API - stateless bearer-token authentication service

Clients exchange a username and password for a signed token at the login
endpoint and present that token on every other API call.

Architecture:
- Domain: entities, value objects, errors, repository contracts
- Application: password hashing, token codec, login, request authentication
- Infrastructure: SQLite user store
- Presentation: FastAPI routes and middleware
"""

import asyncio
import logging
import sys

import uvicorn

from presentation.api.app import create_app
from shared.config.settings import Settings
from shared.container import Container
from shared.logging.config import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level, settings.log_dir)
    logger.info("Starting Token Auth API...")

    container = Container(settings)
    asyncio.run(container.init())
    app = create_app(container)

    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
