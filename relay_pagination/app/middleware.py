"""Request context middleware.

Binds a request id, the HTTP method and the path into the log context for
the lifetime of each HTTP request, so paginator and problem-details logs can
be tied back to the request that produced them.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.datastructures import Headers, MutableHeaders

from relay_pagination.infra.logging import log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "x-request-id"


class RequestContextMiddleware:
    """Pure ASGI middleware that scopes the log context to one request.

    The incoming ``X-Request-ID`` header is reused when present, otherwise a
    UUID4 is generated. The id is stored in ``request.state.request_id`` and
    echoed on the response.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(REQUEST_ID_HEADER, request_id)
            await send(message)

        with log_context(request_id=request_id, method=scope["method"], path=scope["path"]):
            await self.app(scope, receive, send_with_request_id)


__all__ = ["REQUEST_ID_HEADER", "RequestContextMiddleware"]
