"""
Request Logging Middleware
Logs every request with its outcome and duration.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration per request.

    Echoes (or assigns) an X-Request-ID so log lines can be correlated with
    client reports.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"{request.method} {request.url.path} started",
            extra={
                "request_id": request_id,
                "query": str(request.url.query) if request.url.query else None,
                "user_id": request.headers.get("X-User-ID"),
                "client": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"{request.method} {request.url.path} failed",
                exc_info=True,
                extra={"request_id": request_id, "duration_ms": duration_ms, "error": str(e)},
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {duration_ms:.2f}ms",
            extra={"request_id": request_id, "status_code": response.status_code},
        )

        response.headers["X-Request-ID"] = request_id

        return response
