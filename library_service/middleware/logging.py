"""Structured logging middleware"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from library_service.core.config import logger
from library_service.utils.network import get_client_ip

# First path segment under /api -> functional area of the library
ROUTE_GROUPS = {
    "auth": "auth",
    "user": "account",
    "admin": "admin",
    "category": "catalog",
    "book": "catalog",
    "borrowing": "borrowing",
}


def route_group(path: str) -> str:
    """Classify a request path by library area ("service" outside /api)"""
    segments = [s for s in path.split("/") if s]
    if len(segments) < 2 or segments[0] != "api":
        return "service"
    return ROUTE_GROUPS.get(segments[1], "unknown")


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with a correlation ID, library area and principal"""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.time()
        fields = {
            "correlation_id": correlation_id,
            "route_group": route_group(request.url.path),
            "method": request.method,
            "path": request.url.path,
            "client_ip": get_client_ip(request),
        }

        logger.info(
            f"Request started [{fields['route_group']}]: {request.method} {request.url.path}",
            extra={**fields, "user_agent": request.headers.get("User-Agent", "unknown")},
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed [{fields['route_group']}]: {request.method} {request.url.path} - {e}",
                extra={**fields, **self._principal(request), "error": str(e), "duration_ms": self._elapsed(started)},
                exc_info=True,
            )
            raise

        logger.info(
            f"Request completed [{fields['route_group']}]: {request.method} {request.url.path} - {response.status_code}",
            extra={
                **fields,
                **self._principal(request),
                "status_code": response.status_code,
                "duration_ms": self._elapsed(started),
            },
        )

        response.headers["X-Correlation-ID"] = correlation_id
        return response

    @staticmethod
    def _principal(request: Request) -> dict:
        # Populated by JWTAuthMiddleware for authenticated requests
        return {
            "user_id": getattr(request.state, "user_id", None),
            "user_role": getattr(request.state, "role", None),
        }

    @staticmethod
    def _elapsed(started: float) -> float:
        return round((time.time() - started) * 1000, 2)
