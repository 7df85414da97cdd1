"""Problem Details responses for pagination failures.

Every AppException raised while serving a page (bad cursor, unsupported
order field, page size out of range, stale cursor) is rendered as an
RFC 7807 ``application/problem+json`` body.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from relay_pagination.core.exceptions import AppException

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _problem_detail(exc: AppException, instance: str) -> dict[str, Any]:
    """Build the problem body; extra members are merged at the top level."""
    body: dict[str, Any] = {
        "type": exc.type,
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": exc.instance or instance,
    }
    body.update(exc.extra)
    return body


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        "Pagination request rejected",
        extra={
            "path": request.url.path,
            "method": request.method,
            "problem_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_problem_detail(exc, str(request.url)),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the problem-details handler for AppException on app.

    Example:
        app = FastAPI()
        configure_exception_handlers(app)
    """
    app.add_exception_handler(AppException, app_exception_handler)
    logger.debug("Registered problem-details handler on %s", app.title)


__all__ = ["PROBLEM_MEDIA_TYPE", "app_exception_handler", "configure_exception_handlers"]
