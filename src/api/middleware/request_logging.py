"""Request logging middleware.

Emits one structured log line per request; uvicorn's access log is disabled.
"""

import logging
import time

from fastapi import Request

logger = logging.getLogger("api.requests")


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 2)

    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(level, "Request handled", extra={
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "durationMs": duration_ms,
    })
    return response
