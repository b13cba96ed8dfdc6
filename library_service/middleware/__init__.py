"""HTTP middleware"""

from library_service.middleware.jwt_auth import JWTAuthMiddleware
from library_service.middleware.logging import StructuredLoggingMiddleware

__all__ = ["JWTAuthMiddleware", "StructuredLoggingMiddleware"]
