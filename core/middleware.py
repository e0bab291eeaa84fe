import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from core.logging import logger

SKIP_PATHS = ("/api/health", "/docs", "/openapi.json", "/redoc")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every API request"""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in SKIP_PATHS or path.startswith("/uploads"):
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"{request.method} {path} failed after {elapsed_ms:.1f}ms")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        message = f"{request.method} {path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response
