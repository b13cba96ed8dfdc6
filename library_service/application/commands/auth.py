"""
Authentication commands: register, login, token refresh and logout.
"""

import logging
from typing import Optional

from jose import JWTError

from ...core.config import settings
from ...core.errors import AuthenticationError, ValidationError
from ...infrastructure.persistence import UnitOfWork
from ...models.database import utcnow
from ...models.enums import UserType
from ...models.user import User
from ...schemas.token import TokenType
from ...services.activity_log_service import ActivityLogService, ActivityType, activity_log_service
from ...services.refresh_token_service import RefreshTokenService, refresh_token_service
from ...services.token_service import TokenService, token_service
from ...utils.crypto import hash_password, verify_password
from ...utils.validators import (
    validate_email,
    validate_full_name,
    validate_password,
    validate_username,
)
from ..dto import AuthResultDTO, UserDTO, UserInfoDTO
from .base import Command, CommandHandler

logger = logging.getLogger("library-service.application.auth")


class RegisterCommand(Command):
    """
    Register a new account.

    New accounts are NormalUser and inactive until an administrator
    activates them.
    """

    username: str
    password: str
    email: str
    full_name: str
    ip_address: Optional[str] = None


class RegisterHandler(CommandHandler[UserDTO]):
    """Handler for RegisterCommand"""

    def __init__(
        self,
        uow: UnitOfWork,
        activity_log: ActivityLogService = activity_log_service,
    ):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: RegisterCommand) -> UserDTO:
        """
        Create the user after validating every field.

        Raises:
            ValidationError: If a field is invalid or the username/email is taken
        """
        errors: dict[str, list[str]] = {}
        for field, (is_valid, error) in (
            ("username", validate_username(command.username)),
            ("password", validate_password(command.password)),
            ("email", validate_email(command.email)),
            ("full_name", validate_full_name(command.full_name)),
        ):
            if not is_valid:
                errors.setdefault(field, []).append(error)

        async with self._uow as uow:
            if "username" not in errors and await uow.users.username_exists(command.username):
                errors.setdefault("username", []).append("Username is already taken")
            if "email" not in errors and await uow.users.email_exists(command.email):
                errors.setdefault("email", []).append("Email is already registered")

            if errors:
                raise ValidationError(errors)

            user = User(
                username=command.username,
                password_hash=hash_password(command.password),
                email=command.email,
                full_name=command.full_name.strip(),
                user_type=UserType.NORMAL_USER,
                is_active=False,
                created_date=utcnow(),
            )
            await uow.users.add(user)

            await self._activity_log.log_activity(
                uow,
                user_id=user.id,
                activity_type=ActivityType.REGISTRATION,
                details=f"User {user.username} registered",
                ip_address=command.ip_address,
            )

            logger.info(f"User registered: {user.username} (id={user.id})")
            return UserDTO.from_entity(user)


class LoginCommand(Command):
    """Authenticate with username and password"""

    username: str
    password: str
    ip_address: Optional[str] = None


class LoginHandler(CommandHandler[AuthResultDTO]):
    """Handler for LoginCommand"""

    def __init__(
        self,
        uow: UnitOfWork,
        tokens: TokenService = token_service,
        refresh_tokens: RefreshTokenService = refresh_token_service,
        activity_log: ActivityLogService = activity_log_service,
    ):
        self._uow = uow
        self._tokens = tokens
        self._refresh_tokens = refresh_tokens
        self._activity_log = activity_log

    async def handle(self, command: LoginCommand) -> AuthResultDTO:
        """
        Verify credentials and issue a token pair.

        Raises:
            AuthenticationError: Unknown user, wrong password or inactive account
        """
        async with self._uow as uow:
            user = await uow.users.get_by_username(command.username)

            if user is None or not verify_password(command.password, user.password_hash):
                logger.warning(f"Failed login attempt for username={command.username}")
                raise AuthenticationError("Invalid username or password")

            if not user.is_active:
                logger.warning(f"Login attempt for deactivated account: {user.username}")
                raise AuthenticationError("Account is deactivated")

            user.last_login_date = utcnow()

            pair = self._tokens.create_token_pair(user)
            await self._refresh_tokens.save_refresh_token(uow, pair.refresh_token_payload)

            await self._activity_log.log_activity(
                uow,
                user_id=user.id,
                activity_type=ActivityType.LOGIN,
                details="User logged in",
                ip_address=command.ip_address,
            )

            return AuthResultDTO(
                token=pair.access_token,
                refresh_token=pair.refresh_token,
                expires_in=settings.access_token_lifetime,
                user=UserInfoDTO.from_entity(user),
            )


class RefreshTokenCommand(Command):
    """
    Exchange a refresh token for a new token pair.

    The access token may be expired but must have a valid signature and
    belong to the same user as the refresh token.
    """

    token: str
    refresh_token: str
    ip_address: Optional[str] = None


class RefreshTokenHandler(CommandHandler[AuthResultDTO]):
    """Handler for RefreshTokenCommand"""

    def __init__(
        self,
        uow: UnitOfWork,
        tokens: TokenService = token_service,
        refresh_tokens: RefreshTokenService = refresh_token_service,
        activity_log: ActivityLogService = activity_log_service,
    ):
        self._uow = uow
        self._tokens = tokens
        self._refresh_tokens = refresh_tokens
        self._activity_log = activity_log

    def _decode(self, token: str, expected_type: TokenType, verify_exp: bool) -> dict:
        try:
            payload = self._tokens.decode_token(token, verify_exp=verify_exp)
        except JWTError as e:
            raise AuthenticationError(f"Invalid {expected_type.value} token") from e

        if payload.get("type") != expected_type.value:
            raise AuthenticationError("Invalid token type")
        return payload

    async def handle(self, command: RefreshTokenCommand) -> AuthResultDTO:
        """
        Rotate the refresh token.

        Raises:
            AuthenticationError: If either token is invalid, revoked or
                expired, or the user is missing or inactive
        """
        access_payload = self._decode(command.token, TokenType.ACCESS, verify_exp=False)
        refresh_payload = self._decode(command.refresh_token, TokenType.REFRESH, verify_exp=True)

        if access_payload.get("sub") != refresh_payload.get("sub"):
            raise AuthenticationError("Token subject mismatch")

        async with self._uow as uow:
            is_valid, error = await self._refresh_tokens.validate_refresh_token(
                uow, refresh_payload["jti"]
            )
            if not is_valid:
                raise AuthenticationError(error or "Invalid refresh token")

            user = await uow.users.get(int(refresh_payload["sub"]))
            if user is None:
                raise AuthenticationError("User not found")
            if not user.is_active:
                raise AuthenticationError("Account is deactivated")

            await self._refresh_tokens.revoke_token(uow, refresh_payload["jti"])

            pair = self._tokens.create_token_pair(user)
            await self._refresh_tokens.save_refresh_token(
                uow,
                pair.refresh_token_payload,
                parent_jti=refresh_payload["jti"],
            )

            await self._activity_log.log_activity(
                uow,
                user_id=user.id,
                activity_type=ActivityType.TOKEN_REFRESH,
                details="Access token refreshed",
                ip_address=command.ip_address,
            )

            return AuthResultDTO(
                token=pair.access_token,
                refresh_token=pair.refresh_token,
                expires_in=settings.access_token_lifetime,
                user=UserInfoDTO.from_entity(user),
            )


class LogoutCommand(Command):
    """Revoke the caller's refresh token"""

    user_id: int
    refresh_token: str
    ip_address: Optional[str] = None


class LogoutHandler(CommandHandler[bool]):
    """Handler for LogoutCommand"""

    def __init__(
        self,
        uow: UnitOfWork,
        tokens: TokenService = token_service,
        refresh_tokens: RefreshTokenService = refresh_token_service,
        activity_log: ActivityLogService = activity_log_service,
    ):
        self._uow = uow
        self._tokens = tokens
        self._refresh_tokens = refresh_tokens
        self._activity_log = activity_log

    async def handle(self, command: LogoutCommand) -> bool:
        """
        Returns:
            True if a token was revoked

        Raises:
            AuthenticationError: If the refresh token is invalid or belongs
                to another user
        """
        try:
            payload = self._tokens.decode_token(command.refresh_token, verify_exp=False)
        except JWTError as e:
            raise AuthenticationError("Invalid refresh token") from e

        if payload.get("type") != TokenType.REFRESH.value or payload.get("sub") != str(command.user_id):
            raise AuthenticationError("Invalid refresh token")

        async with self._uow as uow:
            revoked = await self._refresh_tokens.revoke_token(uow, payload["jti"])
            await self._activity_log.log_activity(
                uow,
                user_id=command.user_id,
                activity_type=ActivityType.LOGOUT,
                details="User logged out",
                ip_address=command.ip_address,
            )
            return revoked
