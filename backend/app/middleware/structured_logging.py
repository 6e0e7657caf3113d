# backend/app/middleware/structured_logging.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..config import settings

log = logging.getLogger("spm.request")


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    One `http_request` log line per request: method, path, status_code,
    latency_ms and the acting user id when the caller sent one.

    Expects RequestIDMiddleware to run outside it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        t0 = time.perf_counter()
        user_id: Optional[str] = request.headers.get(settings.dev_header_user_id)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = int((time.perf_counter() - t0) * 1000)
            extra = {"user_id": user_id} if user_id else {}
            log.info(
                "http_request %s %s %s %sms",
                request.method,
                request.url.path,
                status_code,
                latency_ms,
                extra={
                    **extra,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "latency_ms": latency_ms,
                },
            )
