"""Wire pagination support into a FastAPI application."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relay_pagination.app.exception_handlers import configure_exception_handlers
from relay_pagination.app.middleware import RequestContextMiddleware
from relay_pagination.infra.logging import setup_logging

if TYPE_CHECKING:
    from fastapi import FastAPI

    from relay_pagination.core.settings import LoggingSettings

logger = logging.getLogger(__name__)


def configure_app(app: FastAPI, log_settings: LoggingSettings | None = None) -> FastAPI:
    """Configure logging, request context and problem-details handling.

    Logging is configured once per process from log_settings, or from the
    LOG_* environment when omitted.

    Example:
        app = configure_app(FastAPI(title="catalog"))

        @app.get("/users")
        async def list_users(find: FindOptionsParams) -> CursorPage[UserResponse]:
            ...
    """
    setup_logging(log_settings)
    configure_exception_handlers(app)
    app.add_middleware(RequestContextMiddleware)
    logger.info("Pagination support configured", extra={"app_title": app.title})
    return app


__all__ = ["configure_app"]
