# =============================================================================
# app/middleware.py - Request Logging
# =============================================================================
# Logs one line per API request:  GET /api/shoots 200 in 12ms
# Non-API paths (docs, root) are skipped. Lines are capped at 80 characters.
# =============================================================================

import logging
import time

from fastapi import Request

logger = logging.getLogger("app.requests")

MAX_LINE_LENGTH = 80


def format_request_line(method: str, path: str, status_code: int, duration_ms: float) -> str:
    """Build the log line, truncated with an ellipsis past MAX_LINE_LENGTH."""
    line = f"{method} {path} {status_code} in {int(duration_ms)}ms"
    if len(line) > MAX_LINE_LENGTH:
        line = line[:MAX_LINE_LENGTH - 1] + "…"
    return line


async def log_requests(request: Request, call_next):
    path = request.url.path
    if not path.startswith("/api"):
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    logger.info(format_request_line(request.method, path, response.status_code, duration_ms))
    return response
