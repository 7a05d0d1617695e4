"""
Request logging middleware.

Logs one line per request once the response is known:
    METHOD PATH - STATUS (PROCESS_TIME ms)
"""

import time
import logging

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shorturl.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Wraps the request/response cycle to log without touching endpoints."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} "
            f"({process_time*1000:.2f}ms)"
        )
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
