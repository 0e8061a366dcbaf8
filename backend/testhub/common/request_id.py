"""Request ID middleware.

Each request gets an ``X-Request-ID`` (the caller's, or a fresh UUID) that is
echoed back and attached to every error envelope. Completed requests are
logged with their latency; probe endpoints log at DEBUG so they do not
drown the access log.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from testhub.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROBE_PATH_SUFFIXES = ("/health", "/ready")


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        fields = {"request_id": request_id, "method": request.method, "path": request.url.path}

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={**fields, "status_code": 500, "latency_ms": _elapsed_ms(start), "error": str(e)},
                exc_info=True,
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id

        level = logging.DEBUG if request.url.path.endswith(PROBE_PATH_SUFFIXES) else logging.INFO
        logger.log(
            level,
            "Request completed",
            extra={**fields, "status_code": response.status_code, "latency_ms": _elapsed_ms(start)},
        )
        return response
