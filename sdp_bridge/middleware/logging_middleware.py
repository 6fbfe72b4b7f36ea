"""
Logging Middleware - Request/Response logging
"""
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from sdp_bridge.utils.logger import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log method, path, status code and duration of every request

    Tool arguments and response bodies are never logged.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        # Health checks are too noisy
        if request.url.path == "/api/health":
            return await call_next(request)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(f"-> {method} {path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(f"x {method} {path} ERROR ({duration_ms}ms): {e.__class__.__name__}")
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"<- {method} {path} {response.status_code} ({duration_ms}ms)")
        response.headers["X-Process-Time"] = str(duration_ms)
        return response
