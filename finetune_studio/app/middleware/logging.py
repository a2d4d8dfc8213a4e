"""
Logging middleware for request/response tracking
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from finetune_studio.utils.logging import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {duration:.3f}s")
        response.headers["X-Process-Time"] = f"{duration:.6f}"

        return response
