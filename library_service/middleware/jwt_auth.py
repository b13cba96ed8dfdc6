"""JWT authentication middleware"""

from fastapi import Request
from fastapi.responses import JSONResponse
from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware

from library_service.core.config import logger
from library_service.core.errors import AuthenticationError
from library_service.schemas.token import TokenType
from library_service.services.token_service import TokenService, token_service

PUBLIC_PATHS = (
    "/",
    "/health",
    "/docs",
    "/docs/oauth2-redirect",
    "/openapi.json",
    "/redoc",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/refresh-token",
)


def _unauthorized(error: str, description: str) -> JSONResponse:
    failure = AuthenticationError(description, details={"error": error})
    return JSONResponse(
        status_code=401,
        content={"detail": failure.to_dict()},
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """
    Validate the bearer access token of every non-public request.

    On success the principal is stored on ``request.state`` as
    ``user_id`` (int), ``username`` and ``role``.
    """

    def __init__(self, app, tokens: TokenService = token_service, public_paths=PUBLIC_PATHS):
        super().__init__(app)
        self.tokens = tokens
        self.public_paths = tuple(public_paths)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/") or "/"
        if request.method == "OPTIONS" or path in self.public_paths:
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return _unauthorized("unauthorized", "Missing or invalid Authorization header")

        token = auth_header[7:]

        try:
            payload = self.tokens.decode_token(token)
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            return _unauthorized("invalid_token", str(e))

        if payload.get("type") != TokenType.ACCESS.value:
            return _unauthorized("invalid_token", "Invalid token type")

        try:
            request.state.user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return _unauthorized("invalid_token", "Invalid token subject")
        request.state.username = payload.get("username")
        request.state.role = payload.get("role")

        logger.debug(f"JWT validated: user_id={request.state.user_id}, role={request.state.role}")

        return await call_next(request)
