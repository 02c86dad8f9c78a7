"""Request timing middleware."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

PERF_LOG_THRESHOLD_MS = 1000
SLOW_REQUEST_THRESHOLD_MS = 2000
COLD_START_THRESHOLD_MS = 5000


async def performance_logger(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log request durations, flagging slow requests and likely cold starts.

    Health checks are always logged so cold start latency shows up in the
    logs even when it stays under the slow threshold.
    """
    start = time.monotonic()
    response = await call_next(request)
    duration_ms = int((time.monotonic() - start) * 1000)

    method = request.method
    path = request.url.path
    status = response.status_code

    if "/health" in path or duration_ms > PERF_LOG_THRESHOLD_MS:
        logger.info(f"[PERF] {method} {path} - {status} - {duration_ms}ms")

    if duration_ms > COLD_START_THRESHOLD_MS:
        logger.warning(f"[POTENTIAL-COLD-START] {method} {path} - {duration_ms}ms")
    elif duration_ms > SLOW_REQUEST_THRESHOLD_MS:
        logger.warning(f"[SLOW-REQUEST] {method} {path} - {duration_ms}ms ({status})")

    response.headers["X-Response-Time"] = f"{duration_ms}ms"
    return response
