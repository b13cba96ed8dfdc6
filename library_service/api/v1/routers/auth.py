"""Authentication endpoints"""

import logging

from fastapi import APIRouter, Depends, status

from library_service.api.v1.errors import http_error
from library_service.application.commands import (
    LoginCommand,
    LoginHandler,
    LogoutCommand,
    LogoutHandler,
    RefreshTokenCommand,
    RefreshTokenHandler,
    RegisterCommand,
    RegisterHandler,
)
from library_service.application.dto import AuthResultDTO, UserDTO, UserInfoDTO
from library_service.application.queries import GetCurrentUserHandler, GetCurrentUserQuery
from library_service.core.dependencies import (
    AuthUser,
    ClientIP,
    get_current_user_handler,
    get_login_handler,
    get_logout_handler,
    get_refresh_token_handler,
    get_register_handler,
)
from library_service.core.errors import LibraryServiceError
from library_service.schemas.auth import LoginRequest, LogoutRequest, RefreshTokenRequest, RegisterRequest
from library_service.schemas.common import MessageResponse

logger = logging.getLogger("library-service.api.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthResultDTO)
async def login(
    request: LoginRequest,
    client_ip: ClientIP,
    handler: LoginHandler = Depends(get_login_handler),
) -> AuthResultDTO:
    """Exchange username and password for an access/refresh token pair"""
    try:
        return await handler.handle(
            LoginCommand(username=request.username, password=request.password, ip_address=client_ip)
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.post("/register", response_model=UserDTO, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    client_ip: ClientIP,
    handler: RegisterHandler = Depends(get_register_handler),
) -> UserDTO:
    """
    Register a new account.

    The account is inactive until an administrator activates it.
    """
    try:
        return await handler.handle(
            RegisterCommand(
                username=request.username,
                password=request.password,
                email=request.email,
                full_name=request.full_name,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.post("/refresh-token", response_model=AuthResultDTO)
async def refresh_token(
    request: RefreshTokenRequest,
    client_ip: ClientIP,
    handler: RefreshTokenHandler = Depends(get_refresh_token_handler),
) -> AuthResultDTO:
    try:
        return await handler.handle(
            RefreshTokenCommand(
                token=request.token,
                refresh_token=request.refresh_token,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.get("/me", response_model=UserInfoDTO)
async def me(
    user: AuthUser,
    handler: GetCurrentUserHandler = Depends(get_current_user_handler),
) -> UserInfoDTO:
    try:
        return await handler.handle(GetCurrentUserQuery(user_id=user.user_id))
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: LogoutRequest,
    user: AuthUser,
    client_ip: ClientIP,
    handler: LogoutHandler = Depends(get_logout_handler),
) -> MessageResponse:
    try:
        await handler.handle(
            LogoutCommand(user_id=user.user_id, refresh_token=request.refresh_token, ip_address=client_ip)
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    logger.info(f"User {user.user_id} logged out")
    return MessageResponse(message="Logged out successfully")
