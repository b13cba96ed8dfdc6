"""Token service for JWT operations"""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from library_service.core.config import logger, settings
from library_service.models.user import User
from library_service.schemas.token import AccessTokenPayload, RefreshTokenPayload, TokenPair, TokenType


class TokenService:
    """Service for creating and validating JWT tokens"""

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm

    def create_access_token(
        self,
        user: User,
        lifetime: int | None = None,
    ) -> tuple[str, AccessTokenPayload]:
        """
        Create an access token carrying the user's identity claims

        Args:
            user: Authenticated user
            lifetime: Token lifetime in seconds (default from settings)

        Returns:
            Tuple of (token string, payload)
        """
        if lifetime is None:
            lifetime = settings.access_token_lifetime

        now = datetime.now(timezone.utc)
        exp = now + timedelta(seconds=lifetime)

        payload = AccessTokenPayload(
            iss=settings.jwt_issuer,
            sub=str(user.id),
            aud=settings.jwt_audience,
            exp=int(exp.timestamp()),
            iat=int(now.timestamp()),
            nbf=int(now.timestamp()),
            jti=str(uuid.uuid4()),
            type=TokenType.ACCESS,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            role=user.user_type.value,
        )

        token = jwt.encode(payload.model_dump(mode="json"), self.secret_key, algorithm=self.algorithm)
        return token, payload

    def create_refresh_token(
        self,
        user_id: int,
        lifetime: int | None = None,
    ) -> tuple[str, RefreshTokenPayload]:
        """
        Create a refresh token

        Args:
            user_id: User ID (subject)
            lifetime: Token lifetime in seconds (default from settings)

        Returns:
            Tuple of (token string, payload)
        """
        if lifetime is None:
            lifetime = settings.refresh_token_lifetime

        now = datetime.now(timezone.utc)
        exp = now + timedelta(seconds=lifetime)

        payload = RefreshTokenPayload(
            iss=settings.jwt_issuer,
            sub=str(user_id),
            aud=settings.jwt_audience,
            exp=int(exp.timestamp()),
            iat=int(now.timestamp()),
            nbf=int(now.timestamp()),
            jti=str(uuid.uuid4()),
            type=TokenType.REFRESH,
        )

        token = jwt.encode(payload.model_dump(mode="json"), self.secret_key, algorithm=self.algorithm)
        return token, payload

    def create_token_pair(self, user: User) -> TokenPair:
        """Create a pair of access and refresh tokens for a user"""
        access_token, access_payload = self.create_access_token(user)
        refresh_token, refresh_payload = self.create_refresh_token(user.id)

        logger.debug(
            f"Token pair created for user {user.id}",
            extra={
                "user_id": user.id,
                "access_jti": access_payload.jti,
                "refresh_jti": refresh_payload.jti,
            },
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_token_payload=access_payload,
            refresh_token_payload=refresh_payload,
        )

    def decode_token(self, token: str, verify_exp: bool = True) -> dict:
        """
        Decode and validate a JWT token

        The signature, issuer and audience are always verified.

        Args:
            token: JWT token string
            verify_exp: Whether to reject expired tokens

        Returns:
            Decoded payload

        Raises:
            JWTError: If token is invalid
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=settings.jwt_audience,
                issuer=settings.jwt_issuer,
                options={"verify_exp": verify_exp},
            )
        except JWTError as e:
            logger.warning(f"Token decode failed: {e}")
            raise


# Global instance
token_service = TokenService()
