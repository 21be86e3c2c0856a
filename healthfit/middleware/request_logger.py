# ==============================================================================
# REQUEST LOGGER MIDDLEWARE
# ==============================================================================
# Per-request access log with timing and a short request id
# ==============================================================================

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of every request.

    A caller-supplied `X-Request-ID` is reused; otherwise an 8-char id
    is generated. Both the id and the duration are echoed back as
    response headers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        logger.debug(f"[{request_id}] {request.method} {request.url.path} - Started")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} "
                f"- Error ({duration_ms:.2f}ms): {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            log_level,
            f"[{request_id}] {request.method} {request.url.path} "
            f"- {response.status_code} ({duration_ms:.2f}ms)"
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms:.2f}ms"
        return response
