# backend/app/middleware/request_id.py
from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Per-request id: taken from an incoming X-Request-ID (any casing) or a new
    UUID4. Exposed to logging through a ContextVar, to other middleware through
    request.state.request_id, and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = (request.headers.get(HEADER) or "").strip() or str(uuid.uuid4())
        request.state.request_id = rid

        token = request_id_ctx.set(rid)
        try:
            resp = await call_next(request)
            resp.headers[HEADER] = rid
            return resp
        finally:
            request_id_ctx.reset(token)
